"""Errors raised by the game rules."""

from __future__ import annotations


class GameError(Exception):
    """Base class for every game error; the message is user-facing."""

    message = "lỗi"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class PlayerNotFound(GameError):
    message = "không có thông tin người chơi"


class YouAlreadyInAnotherRoom(GameError):
    message = "bạn đã ở trong phòng khác"


class PlayerAlreadyInRoom(GameError):
    message = "người chơi đã ở trong phòng"


class YouAlreadyInRoom(GameError):
    message = "bạn đã ở trong phòng"


class RoomNotFound(GameError):
    message = "không có thông tin phòng"


class NotInRoom(GameError):
    message = "bạn chưa vào phòng"


class GameIsExisted(GameError):
    message = "đang có ván diễn ra trong phòng"


class YouAlreadyInGame(GameError):
    message = "bạn đã ở trong ván"


class GameAlreadyStarted(GameError):
    message = "ván đang diễn ra"


class YouNotPlaying(GameError):
    message = "bạn chưa tới lượt"


class YouArePlayed(GameError):
    message = "bạn đã qua lượt"


class TooLow(GameError):
    message = "chưa đủ tẩy"


class EmptyGame(GameError):
    message = "chưa có người tham gia"


class PlayerNotStandYet(GameError):
    message = "người chơi chưa rút xong"


class PlayerIsDone(GameError):
    message = "đã tính rồi"


class YouCannotHit(GameError):
    message = "bạn không thể rút thêm"


class YouCannotStand(GameError):
    message = "bạn chưa thể úp bài"


class NotTimeout(GameError):
    message = "chưa quá thời gian"


class CannotCreateGame(GameError):
    message = "không thể tạo ván mới"


class ServerMaintenance(GameError):
    message = "server đang bảo trì"


class BetTooHigh(GameError):
    """A bet would push the player's stake above the table limit."""

    def __init__(self, max_bet: int) -> None:
        self.max_bet = max_bet
        super().__init__(f"bạn chỉ được bet tối đa {max_bet}🌷")