"""Archive download and extraction adapters."""

from .tar_extractor import TarArchiveExtractor
from .tarball_downloader import TarballDownloader

__all__ = [
	"TarArchiveExtractor",
	"TarballDownloader",
]
