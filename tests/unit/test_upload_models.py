"""Tests for upload models."""
import pytest

from adls_uploader.core.upload.models import (
    FileItem,
    ChunkInfo,
    UploaderConfig,
    TransferClientConfig,
    DEFAULT_CHUNK_SIZE,
    DEFAULT_CHUNK_UPLOAD_RETRIES,
)
from adls_uploader.core.upload.services import DataLakeClientFactory


def resolver(item):
    return 'https://account.dfs.core.windows.net/fs/file'


class TestFileItem:
    """Test suite for FileItem."""
    
    def test_create_basic(self, make_file):
        """Test new items start idle and empty."""
        file = make_file('a.png', 10)
        item = FileItem(file=file)
        
        assert item.file is file
        assert item.uploaded_bytes == 0
        assert item.progress == 0
        assert item.is_uploading is False
        assert item.payload is None
    
    def test_name_and_size(self, make_file):
        """Test shortcuts to the file handle."""
        item = FileItem(file=make_file('a.png', 10))
        
        assert item.name == 'a.png'
        assert item.size == 10
    
    def test_is_complete(self, make_file):
        """Test completion reads the progress percentage."""
        item = FileItem(file=make_file('a.png', 10))
        assert item.is_complete is False
        
        item.progress = 100
        assert item.is_complete is True
    
    def test_reset(self, make_file):
        """Test reset clears transferred bytes."""
        item = FileItem(file=make_file('a.png', 10), uploaded_bytes=5, progress=50.0)
        item.reset()
        
        assert item.uploaded_bytes == 0
        assert item.progress == 0
    
    def test_identity_equality(self, make_file):
        """Test items with equal fields are still distinct."""
        file = make_file()
        
        assert FileItem(file=file) != FileItem(file=file)


class TestChunkInfo:
    """Test suite for ChunkInfo."""
    
    def test_size(self):
        """Test size calculation."""
        chunk = ChunkInfo(index=0, start=100, end=250)
        
        assert chunk.size == 150
    
    def test_immutable(self):
        """Test ChunkInfo is frozen."""
        chunk = ChunkInfo(index=0, start=0, end=100)
        
        with pytest.raises(Exception):
            chunk.start = 50


class TestUploaderConfig:
    """Test suite for UploaderConfig."""
    
    def test_defaults(self):
        """Test default values."""
        config = UploaderConfig(get_item_upload_url=resolver)
        
        assert config.chunk_size == DEFAULT_CHUNK_SIZE == 100 * 1024 * 1024
        assert config.chunk_upload_retries == DEFAULT_CHUNK_UPLOAD_RETRIES == 5
        assert isinstance(config.client_factory, DataLakeClientFactory)
    
    def test_custom_values(self):
        """Test valid values are kept."""
        config = UploaderConfig(get_item_upload_url=resolver, chunk_size=3, chunk_upload_retries=2)
        
        assert config.chunk_size == 3
        assert config.chunk_upload_retries == 2
    
    @pytest.mark.parametrize('value', [0, -1, 1.5, '10', None, True])
    def test_invalid_chunk_size_falls_back(self, value):
        """Test invalid chunk sizes silently use the default."""
        config = UploaderConfig(get_item_upload_url=resolver, chunk_size=value)
        
        assert config.chunk_size == DEFAULT_CHUNK_SIZE
    
    @pytest.mark.parametrize('value', [0, -3, 2.0, None, False])
    def test_invalid_retries_fall_back(self, value):
        """Test invalid retry counts silently use the default."""
        config = UploaderConfig(get_item_upload_url=resolver, chunk_upload_retries=value)
        
        assert config.chunk_upload_retries == DEFAULT_CHUNK_UPLOAD_RETRIES
    
    def test_missing_hooks_become_noops(self, make_file):
        """Test every omitted hook is callable."""
        config = UploaderConfig(get_item_upload_url=resolver)
        item = FileItem(file=make_file())
        
        assert config.on_item_start(item) is None
        assert config.on_item_progress(item) is None
        assert config.on_item_complete(item) is None
        assert config.on_item_error(item, ValueError()) is None
        assert config.on_start() is None
        assert config.on_progress(50.0) is None
        assert config.on_complete() is None
    
    def test_hooks_are_kept(self):
        """Test provided hooks are not replaced."""
        def on_start():
            pass
        
        config = UploaderConfig(get_item_upload_url=resolver, on_start=on_start)
        
        assert config.on_start is on_start
    
    def test_resolver_required(self):
        """Test a non-callable resolver is rejected."""
        with pytest.raises(TypeError):
            UploaderConfig(get_item_upload_url='https://example.com')


class TestTransferClientConfig:
    """Test suite for TransferClientConfig."""
    
    def test_defaults(self):
        """Test default values."""
        config = TransferClientConfig()
        
        assert config.api_version == '2021-08-06'
        assert config.progress_block_size == 4 * 1024 * 1024
        assert config.extra_headers == {}
    
    def test_invalid_block_size(self):
        """Test invalid block size falls back to default."""
        config = TransferClientConfig(progress_block_size=0)
        
        assert config.progress_block_size == 4 * 1024 * 1024
    
    def test_to_aiohttp_timeout(self):
        """Test conversion to aiohttp timeout."""
        timeout = TransferClientConfig(timeout=10, connect_timeout=2).to_aiohttp_timeout()
        
        assert timeout.total == 10
        assert timeout.connect == 2
