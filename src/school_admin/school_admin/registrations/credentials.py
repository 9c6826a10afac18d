from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Callable, Optional

from ..core.constants import GENERATED_PASSWORD_BYTES
from ..core.enums import SecretPolicy


def generate_password(nbytes: int = GENERATED_PASSWORD_BYTES) -> str:
    return secrets.token_urlsafe(nbytes)


@dataclass(frozen=True)
class IssuedSecret:
    secret: str
    # What the approving admin may see; None when the applicant must reset.
    shown: Optional[str]


class SecretIssuer:
    """Produces the secret for a newly provisioned identity under a SecretPolicy."""

    def __init__(self, policy: SecretPolicy = SecretPolicy.SHOW_ONCE, generator: Callable[[], str] = generate_password):
        self.policy = policy
        self._generator = generator

    def issue(self) -> IssuedSecret:
        secret = self._generator()
        if self.policy == SecretPolicy.SHOW_ONCE:
            return IssuedSecret(secret=secret, shown=secret)
        return IssuedSecret(secret=secret, shown=None)
