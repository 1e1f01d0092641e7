"""
Various constants for psdlite
"""

from enum import Enum, IntEnum


class ColorMode(IntEnum):
    """
    Color mode.
    """

    BITMAP = 0
    GRAYSCALE = 1
    INDEXED = 2
    RGB = 3
    CMYK = 4
    MULTICHANNEL = 7
    DUOTONE = 8
    LAB = 9

    @staticmethod
    def channels(value: "ColorMode", alpha: bool = False) -> int:
        """Number of color channels of the mode, plus one with ``alpha``."""
        return {
            ColorMode.BITMAP: 1,
            ColorMode.GRAYSCALE: 1,
            ColorMode.INDEXED: 1,
            ColorMode.RGB: 3,
            ColorMode.CMYK: 4,
            ColorMode.MULTICHANNEL: 3,
            ColorMode.DUOTONE: 1,
            ColorMode.LAB: 3,
        }[value] + alpha


class ChannelID(IntEnum):
    """
    Channel types.
    """

    CHANNEL_0 = 0  # Red, Cyan, Gray, ...
    CHANNEL_1 = 1  # Green, Magenta, ...
    CHANNEL_2 = 2  # Blue, Yellow, ...
    CHANNEL_3 = 3  # Black, ...
    TRANSPARENCY_MASK = -1
    USER_LAYER_MASK = -2


class Clipping(IntEnum):
    """Clipping."""

    BASE = 0
    NON_BASE = 1


class BlendMode(Enum):
    """
    Blend modes.
    """

    PASS_THROUGH = b"pass"
    NORMAL = b"norm"
    DISSOLVE = b"diss"
    DARKEN = b"dark"
    MULTIPLY = b"mul "
    COLOR_BURN = b"idiv"
    LINEAR_BURN = b"lbrn"
    DARKER_COLOR = b"dkCl"
    LIGHTEN = b"lite"
    SCREEN = b"scrn"
    COLOR_DODGE = b"div "
    LINEAR_DODGE = b"lddg"
    LIGHTER_COLOR = b"lgCl"
    OVERLAY = b"over"
    SOFT_LIGHT = b"sLit"
    HARD_LIGHT = b"hLit"
    VIVID_LIGHT = b"vLit"
    LINEAR_LIGHT = b"lLit"
    PIN_LIGHT = b"pLit"
    HARD_MIX = b"hMix"
    DIFFERENCE = b"diff"
    EXCLUSION = b"smud"
    SUBTRACT = b"fsub"
    DIVIDE = b"fdiv"
    HUE = b"hue "
    SATURATION = b"sat "
    COLOR = b"colr"
    LUMINOSITY = b"lum "


class Compression(IntEnum):
    """
    Compression modes.

    Compression. 0 = Raw Data, 1 = RLE compressed, 2 = ZIP without prediction,
    3 = ZIP with prediction. Only RAW and RLE are decoded; ZIP planes read as
    zeros.
    """

    RAW = 0
    RLE = 1
    ZIP = 2
    ZIP_WITH_PREDICTION = 3


class Resource(IntEnum):
    """
    Image resource keys. Only the keys that get a typed view, plus a few
    common ones for display purposes, are listed here.
    """

    RESOLUTION_INFO = 1005
    ALPHA_NAMES_PASCAL = 1006
    CAPTION_PASCAL = 1008
    BACKGROUND_COLOR = 1010
    PRINT_FLAGS = 1011
    LAYER_STATE_INFO = 1024
    LAYER_GROUP_INFO = 1026
    IPTC_NAA = 1028
    GRID_AND_GUIDES_INFO = 1032
    THUMBNAIL_RESOURCE_PS4 = 1033
    COPYRIGHT_FLAG = 1034
    URL = 1035
    THUMBNAIL_RESOURCE = 1036
    GLOBAL_ANGLE = 1037
    ICC_PROFILE = 1039
    SPOT_HALFTONE = 1043
    DOCUMENT_ID = 1044
    UNICODE_ALPHA_NAMES = 1045
    GLOBAL_ALTITUDE = 1049
    VERSION_INFO = 1057
    EXIF_DATA_1 = 1058
    XMP_METADATA = 1060
    PRINT_SCALE = 1062
    PIXEL_ASPECT_RATIO = 1064


class ResolutionUnit(IntEnum):
    """Unit of a resolution value."""

    PIXELS_PER_INCH = 1
    PIXELS_PER_CM = 2


class DimensionUnit(IntEnum):
    """Display unit of width and height."""

    INCH = 1
    CM = 2
    POINT = 3
    PICA = 4
    COLUMN = 5


class ThumbnailFormat(IntEnum):
    """Thumbnail image format."""

    RAW_RGB = 0
    JPEG_RGB = 1
