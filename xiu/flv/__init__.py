"""FLV muxing and demuxing, with H.264 Annex B and AAC ADTS conversion."""