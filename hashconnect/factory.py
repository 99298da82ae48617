from __future__ import annotations
from typing import Any, Optional, Union

from .builder import MessageUtil
from .codecs import Codec, Codecs
from .config import HashConnectSettings, configure_logging
from .hashconnect import HashConnect
from .platform import Platform
from .transport import Transport

def create_hashconnect(*,
                       transport: Union[str, Transport, None] = None,
                       codec: Union[str, Codec, None] = None,
                       platform: Optional[Platform] = None,
                       settings: Optional[HashConnectSettings] = None,
                       debug: Optional[bool] = None,
                       **transport_kwargs: Any) -> HashConnect:
    """
    One-liner factory:
      create_hashconnect()                                  # settings from HASHCONNECT_* env
      create_hashconnect(transport="memory", hub=my_hub, name="dapp")
      create_hashconnect(transport="zyre", codec="msgpack", peer_id="wallet-1")
      create_hashconnect(transport=my_relay, codec=my_codec)

    - transport: "memory" | "zyre" | Transport instance (default: settings.transport)
    - codec: "json" | "msgpack" | Codec instance (default: settings.codec)
    - platform: host capabilities; a headless LocalPlatform if omitted
    - **transport_kwargs: passed to the transport constructor
    """
    settings = settings or HashConnectSettings()
    if debug is not None:
        settings = settings.model_copy(update={"debug": debug})
    configure_logging(settings)

    # Resolve codec
    codec = codec if codec is not None else settings.codec
    codec_obj = Codecs.get(codec) if isinstance(codec, str) else codec

    # Resolve transport
    transport = transport if transport is not None else settings.transport
    if isinstance(transport, str):
        tlabel = transport.lower()
        if tlabel == "memory":
            from .transports.memory import MemoryRelay
            t = MemoryRelay(**transport_kwargs)
        elif tlabel == "zyre":
            from .transports.zyre import ZyreRelay
            t = ZyreRelay(**transport_kwargs)
        else:
            raise ValueError(f"Unknown transport label: {transport}")
    else:
        t = transport

    return HashConnect(
        t,
        messages=MessageUtil(codec_obj),
        platform=platform,
        settings=settings,
    )
