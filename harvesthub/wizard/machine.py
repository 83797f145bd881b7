"""
Registration wizard state machine.

Named states, the events that move between them and the transition
table. Nothing here knows about field validation or HTTP; the wizard
consults ``next_state`` only after the current state's rules pass.

Sign-up method branches at METHOD_SELECT:

    email:  METHOD_SELECT -> ACCOUNT_TYPE -> EMAIL -> PERSONAL_INFO
            -> PASSWORD -> SUCCESS
    social: METHOD_SELECT -> SOCIAL_COMPLETE

SOCIAL_COMPLETE is a stub. Social sign-up performs no OAuth handshake and
creates no account; it only reproduces the terminal screen.
"""

from enum import Enum


class SignupMethod(str, Enum):
    GOOGLE = "google"
    FACEBOOK = "facebook"
    EMAIL = "email"

    @property
    def is_social(self) -> bool:
        return self is not SignupMethod.EMAIL


class WizardState(str, Enum):
    """Wizard screens, each with the step number shown in the progress bar."""

    METHOD_SELECT = "method_select"
    ACCOUNT_TYPE = "account_type"
    EMAIL = "email"
    PERSONAL_INFO = "personal_info"
    PASSWORD = "password"
    SOCIAL_COMPLETE = "social_complete"
    SUCCESS = "success"

    @property
    def step(self) -> int:
        return _STEP_NUMBERS[self]

    @property
    def is_terminal(self) -> bool:
        return self in (WizardState.SOCIAL_COMPLETE, WizardState.SUCCESS)


_STEP_NUMBERS = {
    WizardState.METHOD_SELECT: 0,
    WizardState.ACCOUNT_TYPE: 1,
    WizardState.EMAIL: 2,
    WizardState.PERSONAL_INFO: 3,
    WizardState.PASSWORD: 4,
    WizardState.SOCIAL_COMPLETE: 4,
    WizardState.SUCCESS: 5,
}


class WizardEvent(str, Enum):
    CHOOSE_EMAIL = "choose_email"
    CHOOSE_SOCIAL = "choose_social"
    NEXT = "next"
    BACK = "back"
    SUBMITTED = "submitted"


TRANSITIONS: dict[tuple[WizardState, WizardEvent], WizardState] = {
    (WizardState.METHOD_SELECT, WizardEvent.CHOOSE_EMAIL): WizardState.ACCOUNT_TYPE,
    (WizardState.METHOD_SELECT, WizardEvent.CHOOSE_SOCIAL): WizardState.SOCIAL_COMPLETE,
    (WizardState.ACCOUNT_TYPE, WizardEvent.NEXT): WizardState.EMAIL,
    (WizardState.EMAIL, WizardEvent.NEXT): WizardState.PERSONAL_INFO,
    (WizardState.PERSONAL_INFO, WizardEvent.NEXT): WizardState.PASSWORD,
    (WizardState.PASSWORD, WizardEvent.SUBMITTED): WizardState.SUCCESS,
    # Back never crosses from ACCOUNT_TYPE into the method choice.
    (WizardState.EMAIL, WizardEvent.BACK): WizardState.ACCOUNT_TYPE,
    (WizardState.PERSONAL_INFO, WizardEvent.BACK): WizardState.EMAIL,
    (WizardState.PASSWORD, WizardEvent.BACK): WizardState.PERSONAL_INFO,
}


class InvalidTransition(Exception):
    """The event is not accepted in the current state."""

    def __init__(self, state: WizardState, event: WizardEvent) -> None:
        super().__init__(f"{event.value} is not allowed in state {state.value}")
        self.state = state
        self.event = event


def next_state(state: WizardState, event: WizardEvent) -> WizardState:
    """Look up the transition for ``(state, event)``."""
    try:
        return TRANSITIONS[(state, event)]
    except KeyError:
        raise InvalidTransition(state, event) from None
