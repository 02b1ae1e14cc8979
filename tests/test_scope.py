"""
Tests for the station scope policy.
"""

import pytest

from obsdesk.core.errors import ForbiddenError
from obsdesk.dependencies.auth import CurrentSession, ensure_station_access, require_station, scope_filter


def session_for(role, station_id):
    return CurrentSession(
        user_id=1,
        email="someone@obsdesk.org",
        name="Someone",
        role=role,
        station_id=station_id,
        session_token="token",
    )


def test_super_admin_sees_what_they_ask_for():
    admin = session_for("super_admin", None)
    assert scope_filter(admin) is None
    assert scope_filter(admin, 7) == 7


@pytest.mark.parametrize("role", ["station_admin", "observer"])
def test_station_roles_are_pinned_to_their_station(role):
    user = session_for(role, 3)
    assert scope_filter(user) == 3
    assert scope_filter(user, 9) == 3


def test_station_role_without_station_is_forbidden():
    with pytest.raises(ForbiddenError):
        scope_filter(session_for("observer", None))


def test_ensure_station_access():
    ensure_station_access(session_for("super_admin", None), 5)
    ensure_station_access(session_for("observer", 5), 5)

    with pytest.raises(ForbiddenError):
        ensure_station_access(session_for("observer", 5), 6)
    with pytest.raises(ForbiddenError):
        ensure_station_access(session_for("station_admin", None), 5)


def test_require_station():
    assert require_station(session_for("observer", 4)) == 4
    with pytest.raises(ForbiddenError):
        require_station(session_for("super_admin", None))
