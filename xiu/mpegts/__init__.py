"""MPEG transport stream muxing: PAT, PMT and PES sections and the PSI CRC-32."""