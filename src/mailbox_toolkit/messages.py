"""
User-facing text.

All strings shown to the administrator are Icelandic and live here, so the
GUI and CLI report the same thing for the same failure.
"""

from __future__ import annotations

from mailbox_toolkit.core.errors import (
    AuthenticationExpired,
    DataAccessError,
    MailboxToolkitError,
    PartialSaveError,
    RenderError,
    ValidationError,
)

# Document text
DIRECTORY_TITLE = "Íbúalisti"
DIRECTORY_SUBTITLE = "Raðað í stafrófsröð"
DIRECTORY_FOOTER = "Útprentað: {date}"
DIRECTORY_NAME_HEADER = "Nafn"
DIRECTORY_APARTMENT_HEADER = "Íbúð"
LABELS_TITLE = "Póstkassamerki"
LABEL_HEADING = "Íbúð {number}"

EMPTY_RESIDENTS = "Engar upplýsingar um íbúa fundust."
EMPTY_APARTMENTS = "Engar upplýsingar um íbúðir fundust."

# Failures
FETCH_FAILED = "Villa kom upp við að sækja íbúa. Vinsamlegast reyndu aftur."
SAVE_FAILED = "Villa kom upp við að vista íbúa. Vinsamlegast reyndu aftur."
DELETE_FAILED = "Villa kom upp við að eyða íbúa. Vinsamlegast reyndu aftur."
PARTIAL_SAVE = (
    "Aðeins hluti breytinganna var vistaður ({saved} af {total}). "
    "Vinsamlegast reyndu aftur."
)
RENDER_FAILED = "Villa kom upp við að búa til PDF skjal. Vinsamlegast reyndu aftur."
SESSION_EXPIRED = "Innskráning er útrunnin. Vinsamlegast skráðu þig inn aftur."
LOGIN_FAILED = "Rangt netfang eða lykilorð."
VALIDATION_FAILED = "Vinsamlegast lagfærðu eftirfarandi: {issues}"
UNKNOWN_ERROR = "Óvænt villa kom upp. Vinsamlegast reyndu aftur."

# Validation issues
REQUIRED_FIELDS = "Nafn og íbúðarnúmer eru nauðsynleg"
NAME_REQUIRED = "Nafn vantar í íbúð {apartment}"
APARTMENT_REQUIRED = "Íbúðarnúmer vantar"
NO_NAMES = "Engin nöfn skráð í íbúð {apartment}"
INVALID_PRIORITY = "Forgangur verður að vera heiltala, 0 eða hærri"
DUPLICATE_NAME = "{name} er þegar skráð(ur) í íbúð {apartment}"
DUPLICATE_APARTMENT = "Íbúð {apartment} kemur oftar en einu sinni fyrir"
UNSAVED_RESIDENT = "{name} hefur ekki verið vistaður og fær því ekki forgang"
UNKNOWN_RESIDENT = "Íbúi {id} fannst ekki"
READ_ONLY_SOURCE = "Ekki er hægt að breyta gögnum úr töflureikni"

# Operation -> message for DataAccessError
_DATA_ACCESS_MESSAGES = {
    "fetch": FETCH_FAILED,
    "save": SAVE_FAILED,
    "delete": DELETE_FAILED,
}


def user_message(exc: BaseException, operation: str = "fetch") -> str:
    """
    Map an exception to the message shown to the administrator.

    Args:
        exc: The failure
        operation: What was being attempted ("fetch", "save" or "delete");
            selects the text for data access failures

    Returns:
        Icelandic message; unknown exceptions get a generic message
    """
    if isinstance(exc, AuthenticationExpired):
        return SESSION_EXPIRED
    if isinstance(exc, PartialSaveError):
        total = len(exc.succeeded) + len(exc.failed)
        return PARTIAL_SAVE.format(saved=len(exc.succeeded), total=total)
    if isinstance(exc, ValidationError):
        issues = "; ".join(exc.issues) if exc.issues else str(exc)
        return VALIDATION_FAILED.format(issues=issues)
    if isinstance(exc, DataAccessError):
        return _DATA_ACCESS_MESSAGES.get(operation, FETCH_FAILED)
    if isinstance(exc, RenderError):
        return RENDER_FAILED
    if isinstance(exc, MailboxToolkitError):
        # Wrapped failures (GenerateError) report their cause
        cause = exc.__cause__
        if cause is not None and cause is not exc:
            return user_message(cause, operation)
    return UNKNOWN_ERROR
