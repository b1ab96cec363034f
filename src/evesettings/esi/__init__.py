from evesettings.esi.client import ESIClient
from evesettings.esi.schemas import CharacterInfo

__all__ = ["ESIClient", "CharacterInfo"]
