# server/views.py
# ---------------------------------------------------------
# Access gate: which section actually renders for a session.
# ---------------------------------------------------------

from typing import Optional, Union

from .account_models import Section, User

PUBLIC_SECTIONS = frozenset(
    {Section.HOME, Section.PRICING, Section.FAQ, Section.LOGIN}
)

# A ledger key with no screen of its own.
UNRENDERED_SECTIONS = frozenset({Section.APPLICATION_REVIEW})


def parse_section(value: Union[Section, str, None]) -> Optional[Section]:
    """Section for a raw value, or None if it names no known section."""
    if isinstance(value, Section):
        return value
    try:
        return Section(value)
    except ValueError:
        return None


def resolve_view(user: Optional[User], requested: Union[Section, str, None]) -> Section:
    """
    Map (current user, requested section) to the section to render.

    - private section without a user -> LOGIN (the request is dropped,
      there is no return-after-login)
    - ADMIN_DASHBOARD -> itself for admins, DASHBOARD for other users
    - LOGIN with a user -> DASHBOARD
    - DASHBOARD without a user -> LOGIN
    - anything unrecognised, or without a screen -> HOME
    """
    section = parse_section(requested)
    if section is None:
        return Section.HOME

    if section not in PUBLIC_SECTIONS and user is None:
        return Section.LOGIN

    if section is Section.ADMIN_DASHBOARD:
        return Section.ADMIN_DASHBOARD if user.is_admin else Section.DASHBOARD

    if section is Section.LOGIN:
        return Section.DASHBOARD if user is not None else Section.LOGIN
    if section is Section.DASHBOARD:
        return Section.DASHBOARD if user is not None else Section.LOGIN

    if section in UNRENDERED_SECTIONS:
        return Section.HOME
    return section
