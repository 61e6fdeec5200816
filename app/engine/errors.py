"""
Errors raised by the auction and scoring cores. None of them are retried.
"""


class AuctionError(Exception):
    """Base class for auction and scoring failures"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(AuctionError):
    """Player, team or match does not exist"""


class InvalidBid(AuctionError):
    """Bid amount is below the reserve or the running bid"""


class InsufficientFunds(AuctionError):
    """Team purse cannot cover the bid"""


class AlreadySold(AuctionError):
    """Player status precludes the operation"""


class MatchStateError(AuctionError):
    """Scoring action does not fit the match's current state"""


class PersistenceFailure(AuctionError):
    """Storage layer error; the transaction was rolled back"""
