"""The bundled extractor table.

Order is significant: dispatch is first-match, so hosts with narrower
patterns that overlap broader ones (``vidsrc.stream`` for vidcloud)
come first.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import httpx
import structlog

from resolvarr.domain.entities.catalog import ExtractorDescriptor
from resolvarr.infrastructure.extractors._base import DEFAULT_TIMEOUT
from resolvarr.infrastructure.extractors._common import DEFAULT_USER_AGENT
from resolvarr.infrastructure.extractors.asianload import AsianLoadExtractor
from resolvarr.infrastructure.extractors.bilibili import BilibiliExtractor
from resolvarr.infrastructure.extractors.filemoon import FilemoonExtractor
from resolvarr.infrastructure.extractors.gogocdn import GogoCdnExtractor
from resolvarr.infrastructure.extractors.jwplayer import JWPlayerExtractor
from resolvarr.infrastructure.extractors.kwik import KwikExtractor
from resolvarr.infrastructure.extractors.megacloud import MegacloudExtractor
from resolvarr.infrastructure.extractors.megaup import (
    DEFAULT_KEYS_URL,
    MegaUpExtractor,
)
from resolvarr.infrastructure.extractors.mixdrop import MixDropExtractor
from resolvarr.infrastructure.extractors.mp4player import Mp4PlayerExtractor
from resolvarr.infrastructure.extractors.mp4upload import Mp4UploadExtractor
from resolvarr.infrastructure.extractors.multiquality import MultiQualityExtractor
from resolvarr.infrastructure.extractors.photojin import PhotojinExtractor
from resolvarr.infrastructure.extractors.pixfusion import PixFusionExtractor
from resolvarr.infrastructure.extractors.rubystream import RubystreamExtractor
from resolvarr.infrastructure.extractors.saicord import SaicordExtractor
from resolvarr.infrastructure.extractors.send import SendExtractor
from resolvarr.infrastructure.extractors.smashystream import SmashyStreamExtractor
from resolvarr.infrastructure.extractors.speedostream import SpeedoStreamExtractor
from resolvarr.infrastructure.extractors.streambucket import StreamBucketExtractor
from resolvarr.infrastructure.extractors.streamhub import StreamHubExtractor
from resolvarr.infrastructure.extractors.streamingcommunityz import (
    StreamingCommunityzExtractor,
)
from resolvarr.infrastructure.extractors.streamlare import StreamLareExtractor
from resolvarr.infrastructure.extractors.streamoupload import StreamOUploadExtractor
from resolvarr.infrastructure.extractors.streamp2p import StreamP2PExtractor
from resolvarr.infrastructure.extractors.streamsb import StreamSbExtractor
from resolvarr.infrastructure.extractors.streamtape import StreamTapeExtractor
from resolvarr.infrastructure.extractors.streamwish import StreamWishExtractor
from resolvarr.infrastructure.extractors.uperbox import UperboxExtractor
from resolvarr.infrastructure.extractors.upvid import UpVidExtractor
from resolvarr.infrastructure.extractors.vcdnlare import VcdnlareExtractor
from resolvarr.infrastructure.extractors.vidcloud import VidCloudExtractor
from resolvarr.infrastructure.extractors.vidhide import VidHideExtractor
from resolvarr.infrastructure.extractors.vidmoly import VidMolyExtractor
from resolvarr.infrastructure.extractors.vidsrc import VidSrcExtractor
from resolvarr.infrastructure.extractors.vizcloud import VizCloudExtractor
from resolvarr.infrastructure.extractors.voe import VoeExtractor

log = structlog.get_logger(__name__)


def build_default_catalog(
    http_client: httpx.AsyncClient,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    user_agent: str = DEFAULT_USER_AGENT,
    megaup_keys_url: str = DEFAULT_KEYS_URL,
    disabled: Iterable[str] = (),
) -> tuple[ExtractorDescriptor, ...]:
    """Build the ordered descriptor table around a shared HTTP client.

    Ids listed in *disabled* are left out; unknown ids are logged.
    """
    opts: dict[str, Any] = {"timeout": timeout, "user_agent": user_agent}
    d = ExtractorDescriptor.build
    table = (
        d(
            "gogocdn",
            [r"goload\.", r"gogohd\.", r"gogocdn\.", r"gogoanime\."],
            GogoCdnExtractor(http_client, **opts),
        ),
        d(
            "vidcloud",
            [r"vidcloud\.", r"vidsrc\.stream", r"cloudvidz\.", r"cdnstreame\."],
            VidCloudExtractor(http_client, **opts),
        ),
        d(
            "streamsb",
            [r"streamsb\.", r"watchsb\.", r"streamsss\."],
            StreamSbExtractor(http_client, **opts),
        ),
        d(
            "streamwish",
            [r"streamwish\.", r"dhcplay\."],
            StreamWishExtractor(http_client, **opts),
        ),
        d(
            "streamtape",
            [r"streamtape\.", r"shavetape\.cash"],
            StreamTapeExtractor(http_client, **opts),
        ),
        d("kwik", [r"kwik\."], KwikExtractor(http_client, **opts)),
        d(
            "filemoon",
            [r"filemoon\.", r"2glho\.org"],
            FilemoonExtractor(http_client, **opts),
        ),
        d(
            "megaup",
            [r"megaup\.", r"animekai\."],
            MegaUpExtractor(http_client, keys_url=megaup_keys_url, **opts),
        ),
        d("mixdrop", [r"mixdrop\."], MixDropExtractor(http_client, **opts)),
        d(
            "vidhide",
            [r"[a-z]lions\.", r"smoothpre\."],
            VidHideExtractor(http_client, **opts),
        ),
        d("jwplayer", [r"s3taku\."], JWPlayerExtractor(http_client, **opts)),
        d("asianload", [r"asianload.*?\."], AsianLoadExtractor(http_client, **opts)),
        d("bilibili", [r"bilibili\."], BilibiliExtractor(http_client, **opts)),
        d("mp4upload", [r"mp4upload\."], Mp4UploadExtractor(http_client, **opts)),
        d("mp4player", [r"mp4player\.site"], Mp4PlayerExtractor(http_client, **opts)),
        d(
            "smashystream",
            [r"embed\.smashystream\.", r"smashystream\."],
            SmashyStreamExtractor(http_client, **opts),
            composite=True,
        ),
        d("streamhub", [r"streamhub\."], StreamHubExtractor(http_client, **opts)),
        d(
            "streamlare",
            [r"streamlare\.", r"slwatch\."],
            StreamLareExtractor(http_client, **opts),
        ),
        d("vidmoly", [r"vidmoly\."], VidMolyExtractor(http_client, **opts)),
        d(
            "vizcloud",
            [r"vidstream\.pro", r"vizcloud\."],
            VizCloudExtractor(http_client, **opts),
        ),
        d(
            "voe",
            [r"voe\.", r"kellywhatcould\.com", r"jilliandescribecompany\.com"],
            VoeExtractor(http_client, **opts),
        ),
        d("vcdnlare", [r"vcdnlare\."], VcdnlareExtractor(http_client, **opts)),
        d(
            "megacloud",
            [r"megacloud\.", r"videostr\.net"],
            MegacloudExtractor(http_client, **opts),
        ),
        d(
            "multiquality",
            [r"multiquality\."],
            MultiQualityExtractor(http_client, **opts),
        ),
        d("photojin", [r"photojin\."], PhotojinExtractor(http_client, **opts)),
        d("pixfusion", [r"pixfusion\."], PixFusionExtractor(http_client, **opts)),
        d(
            "rubystream",
            [r"rubystm\.", r"rubystream\."],
            RubystreamExtractor(http_client, **opts),
        ),
        d("saicord", [r"saicord\."], SaicordExtractor(http_client, **opts)),
        d("send", [r"send\.cm", r"send\.now"], SendExtractor(http_client, **opts)),
        d(
            "speedostream",
            [r"speedostream\.", r"spedostream\."],
            SpeedoStreamExtractor(http_client, **opts),
        ),
        d(
            "streambucket",
            [r"streambucket\."],
            StreamBucketExtractor(http_client, **opts),
        ),
        d(
            "streamingcommunityz",
            [r"streamingcommunityz\.", r"vixcloud\."],
            StreamingCommunityzExtractor(http_client, **opts),
        ),
        d(
            "streamoupload",
            [r"streamoupload\."],
            StreamOUploadExtractor(http_client, **opts),
        ),
        d("streamp2p", [r"streamp2p\."], StreamP2PExtractor(http_client, **opts)),
        d("uperbox", [r"uperbox\."], UperboxExtractor(http_client, **opts)),
        d("vidsrc", [r"vidsrc\."], VidSrcExtractor(http_client, **opts)),
        d("upvid", [r"tatavid\.", r"upvid\."], UpVidExtractor(http_client, **opts)),
    )

    drop = set(disabled)
    unknown = drop.difference(entry.id for entry in table)
    if unknown:
        log.warning("extractor_disable_unknown", ids=sorted(unknown))
    catalog = tuple(entry for entry in table if entry.id not in drop)
    log.debug("extractor_catalog_built", count=len(catalog), disabled=sorted(drop))
    return catalog
