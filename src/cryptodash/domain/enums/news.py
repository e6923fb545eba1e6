from enum import Enum


class NewsAgency(str, Enum):
    SEC = "SEC"
    NEWS = "NEWS"
