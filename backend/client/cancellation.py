from client.errors import OperationCancelled


class CancellationToken:
    """Cooperative cancellation flag for in-flight client operations.

    Cancelling does not abort a request already on the wire; it tells the
    caller not to apply the result once it arrives.
    """

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise OperationCancelled("Operation was cancelled")


def is_cancelled(token: CancellationToken | None) -> bool:
    return token is not None and token.cancelled
