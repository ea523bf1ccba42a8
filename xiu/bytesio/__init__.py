"""Byte buffer reading and writing, and asyncio stream I/O."""