from enum import Enum


class Quality(str, Enum):
    HIGHEST = "highest"
    LOWEST = "lowest"
    HIGHEST_AUDIO = "highestaudio"
    LOWEST_AUDIO = "lowestaudio"
    HIGHEST_VIDEO = "highestvideo"
    LOWEST_VIDEO = "lowestvideo"


class Capability(str, Enum):
    AUDIO = "audio"
    VIDEO = "video"
    DEFAULT = "audioandvideo"
