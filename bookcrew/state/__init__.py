"""
Client-side state shared by pages: auth guard, membership record, toasts,
optimistic updates and debounced requests.
"""

from bookcrew.state.auth_guard import AuthGuard, AuthState
from bookcrew.state.debounce import Debouncer, LatestOnly
from bookcrew.state.membership import WorkspaceMemberProvider
from bookcrew.state.optimistic import optimistic_update
from bookcrew.state.toast import Navigation, Toast, ToastKind

__all__ = [
    "AuthGuard",
    "AuthState",
    "Debouncer",
    "LatestOnly",
    "WorkspaceMemberProvider",
    "optimistic_update",
    "Navigation",
    "Toast",
    "ToastKind",
]
