import pytest

from boxfit.config import DEFAULTS, BoxSpec, ResizeOptions, WriteOptions
from boxfit.errors import InvalidArgumentError


def test_defaults() -> None:
    options = ResizeOptions()
    assert options.color == "white"
    assert options.upsize is False
    assert options.bestfit is False
    assert options.max_width == 10000
    assert options.max_height == 10000
    assert options.blur_background is False
    assert options.blur_value == 15.0
    assert not options.wants_blur


def test_from_mapping_accepts_both_spellings() -> None:
    options = ResizeOptions.from_mapping(
        {"maxWidth": 500, "max_height": 400, "blurBackground": True, "blurValue": 3}
    )
    assert options.max_width == 500
    assert options.max_height == 400
    assert options.wants_blur
    assert options.blur_value == 3


def test_coerce() -> None:
    assert ResizeOptions.coerce(None) is DEFAULTS
    custom = ResizeOptions(upsize=True)
    assert ResizeOptions.coerce(custom) is custom
    assert ResizeOptions.coerce({"upsize": True}) == custom


@pytest.mark.parametrize(
    "kwargs",
    [
        {"color": None},
        {"upsize": 1},
        {"max_width": True},
        {"max_width": 0},
        {"max_height": 12.5},
        {"blur_value": -1},
        {"blur_value": False},
    ],
)
def test_resize_options_validation(kwargs) -> None:
    with pytest.raises(InvalidArgumentError):
        ResizeOptions(**kwargs)


def test_write_options_validation() -> None:
    assert WriteOptions().format == "jpeg"
    assert WriteOptions().strip_headers is True
    with pytest.raises(InvalidArgumentError, match="format"):
        WriteOptions(format=True)
    with pytest.raises(InvalidArgumentError, match="directory_mode"):
        WriteOptions(directory_mode="not int")
    with pytest.raises(InvalidArgumentError, match="file_mode"):
        WriteOptions(file_mode="not int")
    with pytest.raises(InvalidArgumentError, match="strip_headers"):
        WriteOptions(strip_headers="not bool")


def test_box_limits() -> None:
    options = ResizeOptions(max_width=100, max_height=50)
    BoxSpec(100, 50).check_limits(options)
    with pytest.raises(InvalidArgumentError, match="width"):
        BoxSpec(101, 50).check_limits(options)
    with pytest.raises(InvalidArgumentError, match="height"):
        BoxSpec(100, 0).check_limits(options)
    with pytest.raises(InvalidArgumentError):
        BoxSpec("10", 10)
