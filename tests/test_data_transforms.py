from typing import Any, Optional

import pytest

import torch
from torch import Generator
from torch.nn import Sequential

from itemaug.core import Color, ConversionError, LengthMismatchError, ShapeMismatchError
from itemaug.data import ArrayItem, Image, Item, tensortoimage
from itemaug.data.transforms import Denormalize, ImageToTensor, Normalize, Pipeline, ToEltype
from itemaug.data.transforms import Transform, apply, apply_, normalize_array


@pytest.fixture
def generator() -> torch.Generator:
    return torch.Generator("cpu").manual_seed(123456789)


class Negate(Transform):
    r"""Transform without buffered code path."""

    def apply(self, item: Item, randstate: Any = None) -> Item:
        return item.tensor(item.tensor().neg())


class AddRandomConstant(Transform):
    r"""Transform with random state."""

    def getrandstate(self, generator: Optional[Generator] = None) -> float:
        return 1 + torch.rand(1, generator=generator).item()

    def apply(self, item: Item, randstate: Any = None) -> Item:
        assert randstate is not None
        return item.tensor(item.tensor().add(randstate))


def test_to_eltype() -> None:
    item = ArrayItem(torch.arange(10))
    tfm = ToEltype(torch.float32)
    assert tfm.dtype == torch.float32

    result = apply(tfm, item)
    assert type(result) is ArrayItem
    assert result.dtype == torch.float32
    assert torch.equal(result.tensor(), torch.arange(10, dtype=torch.float32))
    assert item.dtype == torch.int64

    assert apply(ToEltype(torch.int64), item) is item
    assert apply(ToEltype(int), item) is item
    assert apply(ToEltype("int64"), item) is item

    result = apply(ToEltype(float), item)
    assert result.dtype == torch.get_default_dtype()

    item = ArrayItem(torch.rand(5, dtype=torch.float64))
    assert apply(ToEltype(float), item) is item
    assert torch.equal(apply(ToEltype(torch.float64), item).tensor(), item.tensor())


def test_to_eltype_conversion_error() -> None:
    item = ArrayItem(torch.tensor([0.5, 1.0]))
    with pytest.raises(ConversionError):
        apply(ToEltype(torch.int32), item)

    item = ArrayItem(torch.tensor([1, 256]))
    with pytest.raises(ConversionError):
        apply(ToEltype(torch.uint8), item)

    item = ArrayItem(torch.tensor([1.0 + 2.0j, 3.0 + 0.0j]))
    with pytest.raises(ConversionError):
        apply(ToEltype(torch.float32), item)
    with pytest.raises(ConversionError):
        apply(ToEltype(float), item)

    item = ArrayItem(torch.tensor([1.0 + 0.0j, 3.0 + 0.0j]))
    assert apply(ToEltype(torch.float32), item).tensor().tolist() == [1.0, 3.0]


def test_to_eltype_image() -> None:
    image = Image(torch.randint(0, 256, (3, 4, 5), dtype=torch.uint8), color=Color.RGB)
    result = apply(ToEltype(torch.float32), image)
    assert type(result) is Image
    assert result.color is Color.RGB
    assert result.dtype == torch.float32
    assert torch.equal(result.channelview(), image.channelview().float())


def test_to_eltype_inplace() -> None:
    item = ArrayItem(torch.arange(10))
    tfm = ToEltype(torch.float32)

    buf = ArrayItem(torch.zeros(10, dtype=torch.float32))
    result = apply_(buf, tfm, item)
    assert result is buf
    assert torch.equal(buf.tensor(), apply(tfm, item).tensor())

    with pytest.raises(ShapeMismatchError):
        apply_(ArrayItem(torch.zeros(9)), tfm, item)
    with pytest.raises(TypeError):
        apply_(ArrayItem(torch.zeros(10, dtype=torch.float64)), tfm, item)

    buf = ArrayItem(torch.zeros(10, dtype=torch.float64))
    apply_(buf, ToEltype(float), item)
    assert buf.tensor().tolist() == list(range(10))

    item = ArrayItem(torch.tensor([0.5, 300.0]))
    buf = ArrayItem(torch.zeros(2, dtype=torch.int32))
    with pytest.raises(ConversionError):
        apply_(buf, ToEltype(torch.int32), item)
    assert buf.tensor().eq(0).all()


def test_normalize() -> None:
    tfm = Normalize((1.0,), (2.0,))
    item = ArrayItem(torch.tensor([3.0]))
    result = apply(tfm, item)
    assert type(result) is ArrayItem
    assert result.tensor().tolist() == [1.0]
    assert item.tensor().tolist() == [3.0]

    result = apply(Denormalize((1.0,), (2.0,)), result)
    assert result.tensor().tolist() == [3.0]

    tfm = Normalize((0.0, 0.0, 0.0), (1.0, 1.0, 1.0))
    item = ArrayItem(torch.rand((4, 5, 3)))
    assert torch.equal(apply(tfm, item).tensor(), item.tensor())

    tfm = Normalize((1.0, 2.0, 3.0), (1.0, 1.0, 1.0))
    result = apply(tfm, ArrayItem(torch.ones((2, 2, 3))))
    for c in range(3):
        assert result.tensor()[..., c].eq(-c).all()

    tfm = Normalize([0.5, 0.5], [0.25, 0.5])
    item = ArrayItem(torch.ones((4, 2), dtype=torch.float64))
    result = apply(tfm, item)
    assert result.dtype == torch.float64
    assert result.tensor()[:, 0].eq(2).all()
    assert result.tensor()[:, 1].eq(1).all()


def test_normalize_init() -> None:
    tfm = Normalize((0.1, 0.2, 0.3), (1, 2, 3))
    assert tfm.nchannels == 3
    assert set(dict(tfm.named_buffers()).keys()) == {"means", "stds"}
    assert tfm.means.dtype == torch.float64
    assert "means=" in repr(tfm)

    with pytest.raises(LengthMismatchError):
        Normalize((0.0, 0.0), (1.0,))
    with pytest.raises(ValueError):
        Denormalize((0.0,), (1.0, 1.0, 1.0))
    with pytest.raises(ValueError):
        Normalize((), ())


def test_normalize_stats_copied() -> None:
    means = torch.tensor([1.0], dtype=torch.float64)
    stds = torch.tensor([2.0], dtype=torch.float64)
    tfm = Normalize(means, stds)
    item = ArrayItem(torch.tensor([3.0]))
    assert torch.equal(apply(tfm, item).tensor(), torch.tensor([1.0]))

    means.add_(1)
    stds.mul_(2)
    assert tfm.means.data_ptr() != means.data_ptr()
    assert torch.equal(apply(tfm, item).tensor(), torch.tensor([1.0]))

    inv = tfm.inverse()
    assert inv.means.data_ptr() != tfm.means.data_ptr()
    tfm.means.fill_(0)
    assert torch.equal(apply(inv, ArrayItem(torch.tensor([1.0]))).tensor(), torch.tensor([3.0]))


def test_normalize_invalid_input() -> None:
    tfm = Normalize((0.0, 0.0, 0.0), (1.0, 1.0, 1.0))
    with pytest.raises(TypeError):
        apply(tfm, ArrayItem(torch.ones((4, 3), dtype=torch.int64)))
    with pytest.raises(ShapeMismatchError):
        apply(tfm, ArrayItem(torch.ones((4, 2))))
    with pytest.raises(ShapeMismatchError):
        apply(tfm, ArrayItem(torch.ones((3, 1))))
    with pytest.raises(TypeError):
        apply(tfm, Image(torch.ones((3, 4, 3)), color=Color.RGB))


def test_normalize_denormalize(generator: torch.Generator) -> None:
    means = (0.485, 0.456, 0.406)
    stds = (0.229, 0.224, 0.225)
    item = ArrayItem(torch.rand((8, 9, 3), generator=generator))
    tfm = Normalize(means, stds)
    inv = tfm.inverse()
    assert type(inv) is Denormalize
    assert type(inv.inverse()) is Normalize
    result = apply(inv, apply(tfm, item))
    assert torch.allclose(result.tensor(), item.tensor(), atol=1e-6)

    item = ArrayItem(torch.randn((2, 3, 4, 3), generator=generator, dtype=torch.float64))
    result = apply(Denormalize(means, stds), apply(Normalize(means, stds), item))
    assert torch.allclose(result.tensor(), item.tensor())


def test_normalize_inplace(generator: torch.Generator) -> None:
    tfm = Normalize((0.1, -0.2, 0.3), (1.0, 2.0, 0.5))
    item = ArrayItem(torch.rand((5, 6, 3), generator=generator))
    data = item.tensor().clone()

    buf = ArrayItem(torch.empty((5, 6, 3)))
    result = apply_(buf, tfm, item)
    assert result is buf
    assert torch.equal(buf.tensor(), apply(tfm, item).tensor())
    assert torch.equal(item.tensor(), data)

    buf = ArrayItem(torch.zeros((5, 6, 4)))
    with pytest.raises(ShapeMismatchError):
        apply_(buf, tfm, item)
    assert buf.tensor().eq(0).all()

    with pytest.raises(TypeError):
        apply_(ArrayItem(torch.zeros((5, 6, 3), dtype=torch.float64)), tfm, item)


def test_normalize_array(generator: torch.Generator) -> None:
    data = torch.randn(1000, generator=generator).mul_(3).add_(2)
    array, mean, std = normalize_array(data)
    assert array is data
    assert isinstance(mean, float)
    assert isinstance(std, float)
    assert abs(mean - 2) < 0.5
    assert abs(std - 3) < 0.5
    assert abs(array.mean().item()) < 1e-5
    assert abs(array.std().item() - 1) < 1e-5

    with pytest.raises(TypeError):
        normalize_array(torch.arange(10))


@pytest.mark.parametrize("size", [(5, 7), (4, 5, 6)])
@pytest.mark.parametrize("color", [Color.RGB, Color.RGBA])
def test_image_to_tensor(generator: torch.Generator, size, color: Color) -> None:
    nchannels = color.nchannels
    image = Image(torch.rand((nchannels,) + size, generator=generator), color=color)
    result = apply(ImageToTensor(), image)
    assert type(result) is ArrayItem
    assert result.dtype == torch.float32
    assert result.shape == size + (nchannels,)
    assert result.ndim == image.ndim + 1
    for c in range(nchannels):
        assert torch.equal(result.tensor()[..., c], image.channelview()[c])


def test_image_to_tensor_gray() -> None:
    image = Image(torch.arange(35, dtype=torch.uint8).reshape(5, 7))
    result = apply(ImageToTensor(), image)
    assert result.shape == (5, 7)
    assert result.ndim == image.ndim
    assert result.dtype == torch.float32
    assert result.tensor().max().item() == 34

    result = apply(ImageToTensor("float64"), image)
    assert result.dtype == torch.float64


def test_image_to_tensor_roundtrip(generator: torch.Generator) -> None:
    tfm = ImageToTensor()

    image = Image(torch.rand((8, 9), generator=generator))
    other = tensortoimage(apply(tfm, image).tensor())
    assert other.color is Color.GRAY
    assert torch.equal(other.channelview(), image.channelview())

    image = Image(torch.rand((3, 8, 9), generator=generator), color=Color.RGB)
    other = tensortoimage(apply(tfm, image).tensor())
    assert other.color is Color.RGB
    assert torch.equal(other.channelview(), image.channelview())

    data = torch.randint(0, 256, (3, 8, 9), generator=generator, dtype=torch.uint8)
    image = Image(data, color=Color.RGB)
    other = tensortoimage(apply(tfm, image).tensor())
    assert torch.equal(apply(ToEltype(torch.uint8), other).channelview(), data)


def test_image_to_tensor_inplace(generator: torch.Generator) -> None:
    tfm = ImageToTensor()
    image = Image(torch.rand((3, 8, 9), generator=generator), color=Color.RGB)

    buf = ArrayItem(torch.empty((8, 9, 3)))
    result = apply_(buf, tfm, image)
    assert result is buf
    assert torch.equal(buf.tensor(), apply(tfm, image).tensor())

    buf = ArrayItem(torch.zeros((3, 8, 9)))
    with pytest.raises(ShapeMismatchError):
        apply_(buf, tfm, image)
    assert buf.tensor().eq(0).all()

    with pytest.raises(TypeError):
        apply_(ArrayItem(torch.zeros((8, 9, 3), dtype=torch.float64)), tfm, image)
    with pytest.raises(TypeError):
        apply_(Image(torch.zeros((3, 8, 9)), color=Color.RGB), tfm, image)
    with pytest.raises(TypeError):
        apply(tfm, ArrayItem(torch.zeros((3, 8, 9))))


@pytest.mark.parametrize(
    "tfm,item",
    [
        (ToEltype(torch.float32), ArrayItem(torch.arange(24).reshape(2, 3, 4))),
        (ToEltype(torch.int16), ArrayItem(torch.arange(24, dtype=torch.float64))),
        (Normalize((0.5, 0.25), (2.0, 4.0)), ArrayItem(torch.linspace(0, 1, 20).reshape(10, 2))),
        (Denormalize((0.5, 0.25), (2.0, 4.0)), ArrayItem(torch.linspace(0, 1, 20).reshape(10, 2))),
        (ImageToTensor(), Image(torch.linspace(0, 1, 60).reshape(3, 4, 5), color=Color.RGB)),
        (ImageToTensor(torch.float64), Image(torch.linspace(0, 1, 20).reshape(4, 5))),
        (Negate(), ArrayItem(torch.arange(6))),
    ],
)
def test_buffer_equivalence(tfm: Transform, item: Item) -> None:
    expected = apply(tfm, item)
    buf = ArrayItem(torch.zeros_like(expected.tensor()))
    result = apply_(buf, tfm, item)
    assert result is buf
    assert torch.equal(buf.tensor(), expected.tensor())


def test_transform_protocol() -> None:
    item = ArrayItem(torch.arange(6))

    with pytest.raises(NotImplementedError):
        apply(Transform(), item)

    tfm = Negate()
    assert tfm.getrandstate() is None
    assert torch.equal(tfm(item).tensor(), -item.tensor())
    with pytest.raises(ShapeMismatchError):
        apply_(ArrayItem(torch.zeros(5, dtype=torch.int64)), tfm, item)

    tfm = AddRandomConstant()
    result = apply(tfm, item, randstate=2)
    assert torch.equal(result.tensor(), item.tensor() + 2)
    result = apply(tfm, item)
    assert result.tensor().gt(item.tensor()).all()


def test_pipeline(generator: torch.Generator) -> None:
    means = (0.1, 0.2, 0.3)
    stds = (0.5, 0.5, 0.5)
    image = Image(torch.rand((3, 6, 7), generator=generator), color=Color.RGB)

    tfm = Pipeline(ImageToTensor(), Normalize(means, stds))
    assert len(tfm) == 2
    assert isinstance(tfm[0], ImageToTensor)
    assert tfm.getrandstate() == (None, None)

    expected = apply(Normalize(means, stds), apply(ImageToTensor(), image))
    result = apply(tfm, image)
    assert torch.equal(result.tensor(), expected.tensor())

    buf = ArrayItem(torch.empty((6, 7, 3)))
    assert apply_(buf, tfm, image) is buf
    assert torch.equal(buf.tensor(), expected.tensor())

    with pytest.raises(ValueError):
        apply(tfm, image, randstate=(None,))

    result = Sequential(ImageToTensor(), Normalize(means, stds))(image)
    assert torch.equal(result.tensor(), expected.tensor())

    assert Pipeline([ToEltype(torch.float64)])[0].dtype == torch.float64
    assert apply(Pipeline(), image) is image
    with pytest.raises(TypeError):
        Pipeline(lambda x: x)


def test_pipeline_randstate() -> None:
    item = ArrayItem(torch.zeros(3))
    tfm = Pipeline(AddRandomConstant(), AddRandomConstant())
    result = apply(tfm, item, randstate=(1.0, 2.0))
    assert result.tensor().eq(3).all()

    randstate = tfm.getrandstate(torch.Generator("cpu").manual_seed(0))
    assert len(randstate) == 2
    first = apply(tfm, item, randstate=randstate)
    second = apply(tfm, item, randstate=randstate)
    assert torch.equal(first.tensor(), second.tensor())
