"""Errors raised by the transaction intake and query paths.

Each error carries the HTTP status the API answers with; the handlers in
``transfer_api.main`` render them as ``{"error": message}``.
"""


class TransactionError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidTransactionError(TransactionError):
    status_code = 400


class TransactionNotFoundError(TransactionError):
    status_code = 404


class StoreError(TransactionError):
    status_code = 500


class DuplicateTransactionError(TransactionError):
    """A record with this transaction id already exists.

    Never reaches a caller: the intake gate turns it into a duplicate
    acknowledgement.
    """

    status_code = 202
