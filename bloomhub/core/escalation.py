# bloomhub/core/escalation.py
from functools import lru_cache

from bloomhub.core.config import OperatorAccount, get_settings
from bloomhub.core.security import verify_password


class AdminEscalationPolicy:
    """
    Operator break-glass access.

    A fixed allow-list of emails / subject ids that are always treated as
    administrators. The check never touches the database, so it keeps
    working when role grants are missing or broken.

    Operator accounts are separate: they log in without a `users` row
    (see AuthService.login_customer) and are recognised by the subject
    of their admin token only. Their emails are reserved and never
    join the email allow-list.
    """

    def __init__(
        self,
        emails: list[str] | None = None,
        subjects: list[str] | None = None,
        operators: list[OperatorAccount] | None = None,
    ):
        self.operators = {op.subject: op for op in (operators or [])}
        self.emails = frozenset(e.strip().lower() for e in (emails or []) if e.strip())
        self.subjects = frozenset(s for s in (subjects or []) if s)

    def matches(self, email: str | None = None, subject: str | None = None) -> bool:
        if email and email.strip().lower() in self.emails:
            return True
        if subject and subject in self.subjects:
            return True
        return False

    def operator(self, subject: str) -> OperatorAccount | None:
        return self.operators.get(subject)

    def is_operator_email(self, email: str | None) -> bool:
        email = (email or "").strip().lower()
        return any(op.email.strip().lower() == email for op in self.operators.values())

    def authenticate_operator(self, email: str, password: str) -> OperatorAccount | None:
        """Return the operator whose email and password match, else None."""
        email = (email or "").strip().lower()
        for op in self.operators.values():
            if op.email.strip().lower() == email and verify_password(password, op.password_hash):
                return op
        return None


@lru_cache
def get_escalation_policy() -> AdminEscalationPolicy:
    settings = get_settings()
    return AdminEscalationPolicy(
        emails=settings.ADMIN_ESCALATION_EMAILS,
        subjects=settings.ADMIN_ESCALATION_SUBJECTS,
        operators=settings.ADMIN_OPERATORS,
    )
