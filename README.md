# xiu

Building blocks for live streaming media, in pure Python with no
third-party dependencies:

- **`xiu.bytesio`** – byte buffers for parsing and building binary formats
  (`BytesReader`, `BytesWriter`), a buffered writer that flushes to a stream
  (`AsyncBytesWriter`), and `StreamIO`, which sends and receives chunks of
  bytes over an asyncio `StreamReader`/`StreamWriter` pair.
- **`xiu.flv`** – FLV tag header parsing (`demuxer_tag`), FLV writing
  (`FlvMuxer`), FLV reading (`FlvDemuxer`), and tag body demuxing
  (`FlvVideoTagDemuxer`, `FlvAudioTagDemuxer`). Video tags are converted from
  length-prefixed H.264 NAL units to Annex B (`Mpeg4AvcProcessor`); raw AAC
  frames are given ADTS headers (`Mpeg4AacProcessor`).
- **`xiu.mpegts`** – an MPEG transport stream muxer (`TsMuxer`) with PAT,
  PMT and PES header writers (`PatMuxer`, `PmtMuxer`, `PesMuxer`) and the
  MPEG-2 CRC-32 (`gen_crc32`).
- **`xiu.config`** – loading of a TOML server configuration (`load`,
  `loads`, `Config`).
- **`xiu.logger`** – `FileTarget`, a writable stream that writes into a file
  per day, hour or minute (`Rotate`).

## Installation

```
pip install .
```

Python 3.11 or newer is required.

## Examples

### Reading an FLV file

```python
from xiu.flv.demuxer import FlvAudioTagDemuxer, FlvDemuxer, FlvVideoTagDemuxer
from xiu.flv.flv_define import FlvDataKind
from xiu.flv.flv_errors import FlvDemuxerError

with open("input.flv", "rb") as handle:
    demuxer = FlvDemuxer(handle.read())

demuxer.read_flv_header()
video, audio = FlvVideoTagDemuxer(), FlvAudioTagDemuxer()
while True:
    try:
        tag = demuxer.read_flv_tag()      # None for tags that are neither audio nor video
    except FlvDemuxerError:
        break                             # no complete tag left
    if tag is None:
        continue
    if tag.kind is FlvDataKind.VIDEO:
        frame = video.demux(tag.timestamp, tag.data)   # Annex B H.264 when has_data
    else:
        frame = audio.demux(tag.timestamp, tag.data)   # ADTS AAC when has_data
    if frame.has_data:
        print(tag.kind.value, frame.pts, len(frame.data))
```

Sequence headers only update the demuxer's stored configuration and return
a result whose `has_data` is false.

### Muxing an H.264 stream into MPEG-TS

```python
from xiu.mpegts.ts_define import MPEG_FLAG_IDR_FRAME, PsiStreamType
from xiu.mpegts.ts_muxer import TsMuxer

muxer = TsMuxer()
video_pid = muxer.add_stream(PsiStreamType.PSI_STREAM_H264, b"")

annexb_frame = b"\x00\x00\x00\x01\x65" + bytes(500)
# pts and dts in 90 kHz units
muxer.write(video_pid, 90_000, 90_000, MPEG_FLAG_IDR_FRAME, annexb_frame)
ts_packets = muxer.get_data()    # a whole number of 188-byte packets
```

The PAT and PMT are written before the first frame and again whenever the
PAT period has passed.

### Checksumming a PSI section

```python
from xiu.mpegts.crc32 import gen_crc32

section = bytes([0x00, 0xB0, 0x0D, 0x00, 0x01, 0xC1, 0x00, 0x00, 0x00, 0x01, 0xE1, 0x00])
crc = gen_crc32(0xFFFFFFFF, section)    # written to the stream little-endian
```

### Reading a configuration

```python
from xiu.config import load

config = load("config.toml")
if config.rtmp is not None and config.rtmp.enabled:
    print("RTMP port", config.rtmp.port)
```

Every section is optional; a missing or mistyped field raises `ConfigError`.

```toml
[rtmp]
enabled = true
port = 1935

[rtmp.pull]
enabled = false
address = "192.0.2.10"
port = 1935

[[rtmp.push]]
enabled = false
address = "192.0.2.20"
port = 1935

[httpflv]
enabled = true
port = 8081

[hls]
enabled = true
port = 8080

[log]
level = "info"
```

### Logging to rotating files

```python
import logging

from xiu.logger import FileTarget, Rotate

target = FileTarget(Rotate.HOUR, "./logs")
logging.basicConfig(handlers=[logging.StreamHandler(target)], level=logging.INFO)
```

Files are named after the start of their period, for example
`2024-05-01 13:00:00`.

## What this package does not do

There is no command to run and no server. The configuration describes RTMP,
HTTP-FLV and HLS services, but this package only loads and validates it; it
does not speak RTMP, serve HTTP-FLV or HLS, or relay streams.

## Running the tests

```
pip install ".[test]"
pytest
```