from inkwell.models.navigation import ArchiveDateDB, PageDB, TagDB
from inkwell.repositories.base import BaseRepository


class PageRepository(BaseRepository[PageDB]):
    model = PageDB


class TagRepository(BaseRepository[TagDB]):
    model = TagDB


class ArchiveDateRepository(BaseRepository[ArchiveDateDB]):
    model = ArchiveDateDB
