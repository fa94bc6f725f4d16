"""Checksum strategies for file parts."""
from Crypto.Hash import MD5


class MD5HashStrategy:
    """
    MD5 checksums rendered as lowercase hex.
    
    The hex text is what travels in the part's Content-MD5 header.
    """
    
    def new(self):
        """Start an incremental hash."""
        return MD5.new()
    
    def hash_bytes(self, data: bytes) -> str:
        """Return the hex digest of a buffer."""
        return MD5.new(data).hexdigest()
