from collections.abc import Callable, Mapping
from enum import Enum


class ClientKind(str, Enum):
    TERMINAL = "terminal"
    BROWSER = "browser"
    UNKNOWN = "unknown"


BROWSER_TOKENS = ("mozilla", "chrome", "safari", "firefox", "edge")
TERMINAL_TOKENS = ("curl", "wget")

Classifier = Callable[[Mapping[str, str]], ClientKind]


def _user_agent(headers: Mapping[str, str]) -> str:
    return (headers.get("user-agent") or "").lower()


def _is_terminal_agent(user_agent: str) -> bool:
    return any(token in user_agent for token in TERMINAL_TOKENS)


def classify_by_user_agent(headers: Mapping[str, str]) -> ClientKind:
    user_agent = _user_agent(headers)
    if any(token in user_agent for token in BROWSER_TOKENS):
        return ClientKind.BROWSER
    if _is_terminal_agent(user_agent):
        return ClientKind.TERMINAL
    return ClientKind.UNKNOWN


def classify_by_accept(headers: Mapping[str, str]) -> ClientKind:
    if "text/html" in (headers.get("accept") or "").lower():
        return ClientKind.BROWSER
    if _is_terminal_agent(_user_agent(headers)):
        return ClientKind.TERMINAL
    return ClientKind.UNKNOWN


CLASSIFIERS: dict[str, Classifier] = {
    "user-agent": classify_by_user_agent,
    "accept": classify_by_accept,
}


def get_classifier(name: str) -> Classifier:
    try:
        return CLASSIFIERS[name]
    except KeyError:
        raise ValueError(f"Unknown client classifier: {name}") from None


def wants_color(kind: ClientKind) -> bool:
    return kind is not ClientKind.BROWSER
