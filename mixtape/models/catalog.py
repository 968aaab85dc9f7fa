from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Role(str, Enum):
    LISTENER = "listener"
    ARTIST = "artist"
    DJ = "dj"


@dataclass
class User:
    id: int
    login: str
    display_name: str | None = None
    role: str = Role.LISTENER.value
    created_at: datetime | None = None

    @property
    def is_artist(self) -> bool:
        return self.role == Role.ARTIST.value

    @property
    def is_dj(self) -> bool:
        return self.role == Role.DJ.value


@dataclass
class Asset:
    id: int
    user_id: int
    title: str
    published: bool = True
    created_at: datetime | None = None


@dataclass
class Playlist:
    id: int
    user_id: int
    title: str
    is_mix: bool = False
    created_at: datetime | None = None
