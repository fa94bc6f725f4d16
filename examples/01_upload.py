"""
Upload a file to a resource
"""
import asyncio
import os

from fileservice import FileServiceClient


async def main():
    token = os.environ["FILESERVICE_TOKEN"]
    
    async with FileServiceClient(token, "https://mds.example.com/api/") as client:
        
        # Simple upload; skipped if the server already has the same bytes
        result = await client.upload_file("data.csv", 42)
        print(f"Complete: {result.is_complete}, skipped: {result.skipped}")
        
        # Upload with custom name and part size
        result = await client.upload_file("big.bin", 42, file_name="archive.bin", part_size=8 * 1024 * 1024)
        print(f"Parts: {result.parts_uploaded}/{result.total_parts}")
        
        # Upload with progress callback
        def on_progress(progress):
            print(f"Progress: {progress.percentage:.1f}%")
        
        result = await client.upload_file("large_file.zip", 42, progress_callback=on_progress)
        
        # Resume after a failed part
        if not result.is_complete and result.failed_part is not None:
            result = await client.upload_file("large_file.zip", 42, start_part=result.parts_uploaded)
            print(f"Resumed: {result.is_complete}")


if __name__ == "__main__":
    asyncio.run(main())
