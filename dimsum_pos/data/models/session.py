from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from dimsum_pos.errors import BranchSwitchNotAllowedError


class Branch(BaseModel):
    """A physical outlet."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Branch identifier")
    name: str = Field(description="Branch display name")


class SessionContext(BaseModel):
    """Who is operating the till and for which branch.

    Passed explicitly into a checkout session instead of being read from
    shared state, so two sessions never see each other's branch or user.
    """
    model_config = ConfigDict(frozen=True)

    user_id: str = Field(description="Signed-in user identifier")
    username: str = Field(description="Signed-in user name")
    role: Literal["owner", "cashier"] = Field(description="Owners may switch branches")
    branch_id: Optional[str] = Field(default=None, description="Active branch identifier")
    branch_name: Optional[str] = Field(default=None, description="Active branch name")

    @property
    def is_owner(self) -> bool:
        return self.role == "owner"

    def switch_branch(self, branch: Branch) -> "SessionContext":
        """Return a context bound to another branch; only owners may do this."""
        if not self.is_owner:
            raise BranchSwitchNotAllowedError(f"User {self.username!r} cannot switch branch")
        return self.model_copy(update={"branch_id": branch.id, "branch_name": branch.name})
