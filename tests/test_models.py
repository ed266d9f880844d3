import pytest

from marvel_data.models import Character, Comic, DataWrapper, Image, character_list_decoder, comic_list_decoder

from conftest import AMAZING_FANTASY, SPIDER_MAN, wrap


def test_character_list_decoder():
    wrapper = character_list_decoder(wrap([SPIDER_MAN], offset=0, limit=20, total=1))

    assert isinstance(wrapper, DataWrapper)
    assert wrapper.status == "Ok"
    assert (wrapper.data.offset, wrapper.data.limit, wrapper.data.total, wrapper.data.count) == (0, 20, 1, 1)

    spider_man = wrapper.data.results[0]
    assert isinstance(spider_man, Character)
    assert spider_man.name == "Spider-Man"
    assert spider_man.urls["detail"] == "http://marvel.com/characters/54/spider-man"
    assert spider_man.comics.available == 4100
    assert spider_man.comics.items[0].name == "Amazing Fantasy (1962) #15"
    assert spider_man.events.items == []


def test_comic_list_decoder():
    wrapper = comic_list_decoder(wrap([AMAZING_FANTASY]))

    comic = wrapper.data.results[0]
    assert isinstance(comic, Comic)
    assert comic.id == 6482
    assert comic.description is None


def test_story_without_thumbnail():
    story = Comic.from_dict({"id": 1, "title": "Untitled story", "thumbnail": None})

    assert story.thumbnail is None


def test_image_urls():
    image = Image.from_dict(SPIDER_MAN["thumbnail"])

    assert image.url() == "http://i.annihil.us/u/prod/marvel/i/mg/3/50/526548a343e4b.jpg"
    assert image.url(Image.PORTRAIT_XLARGE) == "http://i.annihil.us/u/prod/marvel/i/mg/3/50/526548a343e4b/portrait_xlarge.jpg"


def test_missing_required_field_raises_key_error():
    with pytest.raises(KeyError):
        Character.from_dict({"name": "No id"})
