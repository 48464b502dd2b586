from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    broadcasted when the user confirms logging out
    """

    bubble = True


class LoginRequestedMessage(Message):
    """
    Fired by guest-facing screens (sidebar button, add to cart) to open the login screen.
    """

    bubble = True


class SessionExpiredMessage(Message):
    """
    Posted by the API client hook after a 401. The session is already cleared;
    the app only has to navigate back to its root.
    """

    bubble = True


class NewOrderMessage(Message):
    """
    Fired when checkout created an order, so the orders screen reloads.
    """

    bubble = True


class ModeSwitchedMessage(Message):
    """
    fired whenever switch_mode is called
    must be fired from app level
    """

    bubble = True

    def __init__(self, old_mode: str, new_mode: str) -> None:
        super().__init__()
        self.old_mode = old_mode
        self.new_mode = new_mode
