"""
Drive the upload protocol step by step
"""
import asyncio
import os

import aiofiles

from fileservice import FileServiceClient, FilePart
from fileservice.core.upload.strategies import FixedSizeChunkingStrategy, MD5HashStrategy


async def main():
    token = os.environ["FILESERVICE_TOKEN"]
    path = "report.pdf"
    
    async with FileServiceClient(token, "https://mds.example.com/api/") as client:
        
        # Log every request
        client.on('navigated', lambda e: print(f"{e.method} {e.uri} -> {e.status_code}"))
        
        check = await client.check_file(7)
        if check.found:
            print(f"Server has {check.file_name_on_server}, md5 {check.hash_for_file_on_server}")
        
        created = await client.create_upload_session(7)
        if not created.created:
            print(f"Rejected: {created.error_code} {created.error}")
            return
        session = created.session
        
        hasher = MD5HashStrategy()
        size = os.path.getsize(path)
        chunks = FixedSizeChunkingStrategy(session.chunk_size or 4 * 1024 * 1024).calculate_chunks(size)
        
        uploaded = 0
        async with aiofiles.open(path, 'rb') as stream:
            for start, end in chunks:
                length = end - start
                await stream.seek(start)
                part = FilePart(offset=start, size=length, hash=hasher.hash_bytes(await stream.read(length)))
                result = await client.upload_stream(
                    7, session.session_id, stream, part, "report.pdf", size, len(chunks), uploaded
                )
                if not result.accepted:
                    print(f"Part at {start} failed: {result.status_code}")
                    break
                uploaded = result.parts_uploaded
        
        print(f"Uploaded {uploaded}/{len(chunks)} parts")


if __name__ == "__main__":
    asyncio.run(main())
