#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Exam Command Centre - API Dependencies
Dependency providers for the FastAPI application
"""

from fastapi import Request

from dashboard.core.data_manager import DataManager

# ===== PROVIDERS =====

def get_data_manager(request: Request) -> DataManager:
    """DataManager owned by the running application"""
    return request.app.state.data_manager