#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exam Command Centre - Terminal front end
Study tasks, notes, exam countdown and focus mode from the command line,
against the local store or a deployed backend

Version: 1.0.0
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional

from config import AppConfig, ConfigError, load_config
from models.state import ExamState
from models.task import Task, find_task
from services import create_state_manager
from services.api_client import ApiConnectionError, ApiError, StudyApiClient
from services.kpi import compute_kpis, exam_countdown
from services.state_service import StudyStateManager
from ui.charts import all_charts
from ui.messages import (
    exam_message,
    focus_message,
    kpis_message,
    notes_message,
    task_line,
    tasks_list_message,
    today_stamp,
    usp_cards_html,
    usp_cards_message,
)
from ui.progress import subjects_progress
from utils.datetime_utils import now_local
from utils.logger import setup_logger
from utils.validators import clean_task_title, is_valid_date

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USER_ERROR = 1

# Commands that have a backend counterpart; the rest always use the local store
API_COMMANDS = {"tasks", "add", "done", "undo", "rm", "notes", "exam", "kpis"}

class UserError(Exception):
    """Bad input from the user, reported without a traceback"""
    pass

def fail(message: str) -> int:
    print(f"❌ {message}", file=sys.stderr)
    return EXIT_USER_ERROR

def require_task(task: Optional[Task], id_or_prefix: str) -> Task:
    if task is None:
        raise UserError(f"No single task matches id {id_or_prefix!r}")
    return task

def exam_from_args(args) -> ExamState:
    """Exam to save from ``exam LABEL DATE`` / ``exam --clear``."""
    if args.clear:
        return ExamState()
    if args.date is None:
        raise UserError("Both LABEL and DATE are required, e.g. exam \"Maths paper 1\" 2026-06-12")
    date = args.date.strip()
    if date and not is_valid_date(date):
        raise UserError(f"Date {args.date!r} is not a YYYY-MM-DD calendar date")
    return ExamState(label=args.label.strip(), date=date)

def notes_from_args(args) -> Optional[str]:
    if args.clear:
        return ""
    if args.text:
        return " ".join(args.text)
    return None

# ===== LOCAL STORE COMMANDS =====

class LocalCommands:
    """Commands served by ``StudyStateManager`` over the local store"""

    def __init__(self, manager: StudyStateManager, config: AppConfig):
        self.manager = manager
        self.config = config

    def now(self):
        return now_local(self.config.timezone)

    def run(self, args) -> int:
        handler = getattr(self, f"cmd_{args.command}")
        code = handler(args)
        error = self.manager.last_persist_error
        if error is not None:
            print(f"⚠️ Change kept for this session only: {error}", file=sys.stderr)
        return code

    def _find(self, id_or_prefix: str) -> Task:
        return require_task(self.manager.find_task(id_or_prefix), id_or_prefix)

    def cmd_tasks(self, args) -> int:
        print(today_stamp(self.now()))
        print(tasks_list_message(self.manager.tasks))
        return EXIT_OK

    def cmd_add(self, args) -> int:
        task = self.manager.add_task(" ".join(args.title))
        if task is None:
            return fail("Task title must not be empty")
        print(task_line(task))
        return EXIT_OK

    def _set_done(self, args, done: bool) -> int:
        task = self._find(args.task_id)
        self.manager.toggle_task(task.id, done)
        print(task_line(task))
        return EXIT_OK

    def cmd_done(self, args) -> int:
        return self._set_done(args, True)

    def cmd_undo(self, args) -> int:
        return self._set_done(args, False)

    def cmd_rm(self, args) -> int:
        task = self._find(args.task_id)
        self.manager.delete_task(task.id)
        print(f"🗑 Deleted: {task.title}")
        return EXIT_OK

    def cmd_notes(self, args) -> int:
        notes = notes_from_args(args)
        if notes is not None:
            self.manager.save_notes(notes)
        print(notes_message(self.manager.state.notes))
        return EXIT_OK

    def cmd_exam(self, args) -> int:
        if args.label is not None or args.clear:
            exam = exam_from_args(args)
            self.manager.save_exam(exam.label, exam.date)
        exam = self.manager.state.exam
        print(exam_message(exam, exam_countdown(exam, self.now()).label))
        return EXIT_OK

    def cmd_focus(self, args) -> int:
        if args.mode == "toggle":
            self.manager.set_focus(not self.manager.state.focus)
        elif args.mode is not None:
            self.manager.set_focus(args.mode == "on")
        print(focus_message(self.manager.state.focus))
        return EXIT_OK

    def cmd_kpis(self, args) -> int:
        kpis = self.manager.compute_kpis(now=self.now())
        if args.json:
            print(json.dumps(kpis.to_dict(), ensure_ascii=False, indent=2))
        else:
            print(kpis_message(kpis))
        return EXIT_OK

    def cmd_subjects(self, args) -> int:
        print("\n".join(subjects_progress(self.manager.state.subjects)))
        return EXIT_OK

    def cmd_usp(self, args) -> int:
        cards = self.manager.state.usp_cards
        print(usp_cards_html(cards) if args.html else usp_cards_message(cards))
        return EXIT_OK

    def cmd_charts(self, args) -> int:
        print(json.dumps(all_charts(self.manager.state.subjects), ensure_ascii=False, indent=2))
        return EXIT_OK

    def cmd_reset(self, args) -> int:
        if not args.yes:
            answer = input("Reset all local study data? [y/N] ")
            if answer.strip().lower() not in ("y", "yes"):
                print("Reset cancelled.")
                return EXIT_OK
        self.manager.reset()
        print("🧹 Local study data reset.")
        return EXIT_OK

# ===== BACKEND COMMANDS =====

class ApiCommands:
    """Task, notes and exam commands served by the REST backend"""

    def __init__(self, client: StudyApiClient, config: AppConfig):
        self.client = client
        self.config = config

    def now(self):
        return now_local(self.config.timezone)

    async def run(self, args) -> int:
        handler = getattr(self, f"cmd_{args.command}")
        return await handler(args)

    async def _find(self, id_or_prefix: str) -> Task:
        return require_task(find_task(await self.client.list_tasks(), id_or_prefix), id_or_prefix)

    async def cmd_tasks(self, args) -> int:
        print(today_stamp(self.now()))
        print(tasks_list_message(await self.client.list_tasks()))
        return EXIT_OK

    async def cmd_add(self, args) -> int:
        title = clean_task_title(" ".join(args.title))
        if title is None:
            return fail("Task title must not be empty")
        task = await self.client.create_task(title)
        print(task_line(task))
        return EXIT_OK

    async def _set_done(self, args, done: bool) -> int:
        task = await self._find(args.task_id)
        await self.client.set_task_done(task.id, done)
        task.done = done
        print(task_line(task))
        return EXIT_OK

    async def cmd_done(self, args) -> int:
        return await self._set_done(args, True)

    async def cmd_undo(self, args) -> int:
        return await self._set_done(args, False)

    async def cmd_rm(self, args) -> int:
        task = await self._find(args.task_id)
        await self.client.delete_task(task.id)
        print(f"🗑 Deleted: {task.title}")
        return EXIT_OK

    async def cmd_notes(self, args) -> int:
        notes = notes_from_args(args)
        if notes is not None:
            await self.client.save_notes(notes)
        else:
            notes = (await self.client.get_state())["notes"]
        print(notes_message(notes))
        return EXIT_OK

    async def cmd_exam(self, args) -> int:
        if args.label is not None or args.clear:
            exam = exam_from_args(args)
            await self.client.save_exam(exam.label, exam.date)
        else:
            exam = (await self.client.get_state())["exam"]
        print(exam_message(exam, exam_countdown(exam, self.now()).label))
        return EXIT_OK

    async def cmd_kpis(self, args) -> int:
        tasks = await self.client.list_tasks()
        state = await self.client.get_state()
        kpis = compute_kpis(tasks, state["notes"], state["exam"], now=self.now())
        if args.json:
            print(json.dumps(kpis.to_dict(), ensure_ascii=False, indent=2))
        else:
            print(kpis_message(kpis))
        return EXIT_OK

async def run_api_command(args, config: AppConfig, base_url: str) -> int:
    async with StudyApiClient(
        base_url,
        api_prefix=config.api.api_prefix,
        timeout=config.api.timeout
    ) as client:
        return await ApiCommands(client, config).run(args)

# ===== ARGUMENTS =====

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exam-centre",
        description="Exam Command Centre: tasks, notes and exam countdown"
    )
    parser.add_argument('--store', default=None, help='Local store file (default: ECC_STORE_PATH)')
    parser.add_argument('--api', default=None, metavar='URL', help='Use the backend at URL for tasks, notes and exam')
    parser.add_argument('--log-level', default=None, help='DEBUG/INFO/WARNING/ERROR/CRITICAL')

    sub = parser.add_subparsers(dest='command', metavar='COMMAND')
    sub.required = True

    sub.add_parser('tasks', help='List tasks, newest first')

    add = sub.add_parser('add', help='Add a task')
    add.add_argument('title', nargs='+', help='Task title')

    for name, text in (('done', 'Mark a task done'), ('undo', 'Mark a task not done'), ('rm', 'Delete a task')):
        cmd = sub.add_parser(name, help=text)
        cmd.add_argument('task_id', help='Task id or a unique id prefix')

    notes = sub.add_parser('notes', help='Show or replace notes')
    notes.add_argument('text', nargs='*', help='New notes text')
    notes.add_argument('--clear', action='store_true', help='Empty the notes')

    exam = sub.add_parser('exam', help='Show or set the next exam')
    exam.add_argument('label', nargs='?', default=None, help='Exam label')
    exam.add_argument('date', nargs='?', default=None, help='Exam date (YYYY-MM-DD)')
    exam.add_argument('--clear', action='store_true', help='Forget the exam')

    focus = sub.add_parser('focus', help='Show or switch focus mode')
    focus.add_argument('mode', nargs='?', choices=['on', 'off', 'toggle'], default=None)

    kpis = sub.add_parser('kpis', help='Show study KPIs')
    kpis.add_argument('--json', action='store_true', help='Print as JSON')

    sub.add_parser('subjects', help='Show subject progress')

    usp = sub.add_parser('usp', help='Show the value cards')
    usp.add_argument('--html', action='store_true', help='Print escaped HTML')

    sub.add_parser('charts', help='Print chart configurations as JSON')

    reset = sub.add_parser('reset', help='Clear all local study data')
    reset.add_argument('--yes', action='store_true', help='Skip the confirmation')

    serve = sub.add_parser('serve', help='Run the REST backend')
    serve.add_argument('--host', default=None)
    serve.add_argument('--port', type=int, default=None)
    serve.add_argument('--reload', action='store_true')

    return parser

# ===== ENTRY POINT =====

def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == 'serve':
        from dashboard.app import run_dashboard
        run_dashboard(host=args.host, port=args.port, reload=args.reload)
        return EXIT_OK

    try:
        config = load_config()
    except ConfigError as e:
        return fail(str(e))

    config.ensure_directories()
    log_file = config.logging.log_file
    setup_logger(
        log_file=str(log_file) if log_file else None,
        level=args.log_level or config.logging.level.value
    )

    base_url = args.api or config.api.base_url
    try:
        if base_url and args.command in API_COMMANDS:
            logger.debug(f"🌐 Using backend {base_url}")
            return asyncio.run(run_api_command(args, config, base_url))

        manager = create_state_manager(config, store_path=args.store)
        return LocalCommands(manager, config).run(args)
    except UserError as e:
        return fail(str(e))
    except ApiConnectionError as e:
        return fail(f"Backend unreachable: {e.reason}")
    except ApiError as e:
        return fail(f"Backend rejected the request: {e.reason} ({e.status})")

if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        logger.info("👋 Stopped by user")
        sys.exit(EXIT_USER_ERROR)
