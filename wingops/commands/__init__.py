"""WingOps CLI commands"""

from wingops.commands.admin import admin_verify
from wingops.commands.backup import backup_deploy
from wingops.commands.coverage import coverage
from wingops.commands.database import db_migrate
from wingops.commands.doctor import doctor
from wingops.commands.frontend import frontend_publish
from wingops.commands.jwt import jwt_inspect
from wingops.commands.pipeline import pipeline_validate

__all__ = [
    "admin_verify",
    "backup_deploy",
    "coverage",
    "db_migrate",
    "doctor",
    "frontend_publish",
    "jwt_inspect",
    "pipeline_validate",
]
