"""
Response payloads returned by the Marvel API.

Every endpoint answers with the same envelope:
DataWrapper -> DataContainer -> results[]
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass
class Image:
    path: str
    extension: str

    # https://developer.marvel.com/documentation/images
    PORTRAIT_XLARGE = "portrait_xlarge"
    STANDARD_LARGE = "standard_large"
    LANDSCAPE_INCREDIBLE = "landscape_incredible"

    def url(self, variant: str = None) -> str:
        """Full image URL, optionally for one of the API's size variants."""
        if variant:
            return f"{self.path}/{variant}.{self.extension}"
        return f"{self.path}.{self.extension}"

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional['Image']:
        if not data:
            return None
        return cls(path=data['path'], extension=data['extension'])


@dataclass
class ResourceSummary:
    resource_uri: str
    name: str
    type: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ResourceSummary':
        return cls(resource_uri=data['resourceURI'], name=data['name'], type=data.get('type'))


@dataclass
class ResourceList:
    available: int = 0
    returned: int = 0
    collection_uri: Optional[str] = None
    items: List[ResourceSummary] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ResourceList':
        if not data:
            return cls()
        return cls(
            available=data.get('available', 0),
            returned=data.get('returned', 0),
            collection_uri=data.get('collectionURI'),
            items=[ResourceSummary.from_dict(item) for item in data.get('items') or []],
        )


@dataclass
class Character:
    id: int
    name: str
    description: str = ""
    modified: Optional[str] = None
    resource_uri: Optional[str] = None
    thumbnail: Optional[Image] = None
    urls: Dict[str, str] = field(default_factory=dict)
    comics: ResourceList = field(default_factory=ResourceList)
    series: ResourceList = field(default_factory=ResourceList)
    stories: ResourceList = field(default_factory=ResourceList)
    events: ResourceList = field(default_factory=ResourceList)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Character':
        return cls(
            id=data['id'],
            name=data['name'],
            description=data.get('description') or "",
            modified=data.get('modified'),
            resource_uri=data.get('resourceURI'),
            thumbnail=Image.from_dict(data.get('thumbnail')),
            urls={u['type']: u['url'] for u in data.get('urls') or []},
            comics=ResourceList.from_dict(data.get('comics')),
            series=ResourceList.from_dict(data.get('series')),
            stories=ResourceList.from_dict(data.get('stories')),
            events=ResourceList.from_dict(data.get('events')),
        )


@dataclass
class Comic:
    """A comic, series, story or event; the four share this shape."""
    id: int
    title: str
    description: Optional[str] = None
    resource_uri: Optional[str] = None
    thumbnail: Optional[Image] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Comic':
        return cls(
            id=data['id'],
            title=data['title'],
            description=data.get('description'),
            resource_uri=data.get('resourceURI'),
            thumbnail=Image.from_dict(data.get('thumbnail')),
        )


@dataclass
class DataContainer(Generic[T]):
    offset: int
    limit: int
    total: int
    count: int
    results: List[T]


@dataclass
class DataWrapper(Generic[T]):
    code: int
    status: str
    data: DataContainer[T]
    copyright: Optional[str] = None
    attribution_text: Optional[str] = None
    etag: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], item_decoder: Callable[[Dict[str, Any]], T]) -> 'DataWrapper[T]':
        container = data['data']
        return cls(
            code=data['code'],
            status=data['status'],
            copyright=data.get('copyright'),
            attribution_text=data.get('attributionText'),
            etag=data.get('etag'),
            data=DataContainer(
                offset=container['offset'],
                limit=container['limit'],
                total=container['total'],
                count=container['count'],
                results=[item_decoder(item) for item in container['results']],
            ),
        )


def character_list_decoder(data: Dict[str, Any]) -> DataWrapper[Character]:
    return DataWrapper.from_dict(data, Character.from_dict)


def comic_list_decoder(data: Dict[str, Any]) -> DataWrapper[Comic]:
    return DataWrapper.from_dict(data, Comic.from_dict)
