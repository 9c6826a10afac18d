from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Identity:
    """A login credential known to the identity provider.

    The secret itself never leaves the provider; only the id and email do.
    """

    identity_id: str
    email: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    confirmed: bool = True
    created_at: Optional[datetime] = None
