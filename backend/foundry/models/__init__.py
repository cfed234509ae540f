"""
Foundry — ORM Models
=====================

Every model module is imported here so that `Base.metadata` is complete
whenever `foundry.models` is imported (Alembic autogenerate, test fixtures,
table creation from the CLI).
"""

from foundry.models.role import Role, UserRole
from foundry.models.team import Team, TeamMember, TeamRoles
from foundry.models.user import User

__all__ = ["Role", "Team", "TeamMember", "TeamRoles", "User", "UserRole"]
