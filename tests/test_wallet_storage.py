"""Tests for encrypted wallet storage."""

import json
import os
import stat

import pytest

from stealthwallet.keys import derive_main_address, generate_random_keys
from stealthwallet.meta_address import meta_address_to_hex
from stealthwallet.storage import (
    EncryptedWallet,
    FileWalletStorage,
    InMemoryWalletStorage,
    open_wallet,
    seal_wallet,
)
from stealthwallet.types import (
    DecryptionFailedError,
    InvalidWalletFormatError,
    UnsupportedWalletVersionError,
    WalletExistsError,
    WalletIntegrityCheckFailedError,
    WalletNotFoundError,
)
from test_vectors import TEST_PASSWORD


@pytest.fixture(scope="module")
def keys():
    return generate_random_keys()


@pytest.fixture
def storage(tmp_path):
    return FileWalletStorage(tmp_path / "wallet-dir")


class TestSealAndOpen:
    """Test the record format and integrity checks."""

    def test_round_trip(self, keys) -> None:
        wallet = seal_wallet(keys, TEST_PASSWORD, created_at=1700000000000)
        opened = open_wallet(wallet, TEST_PASSWORD)

        assert opened.keys == keys
        assert opened.meta_address == meta_address_to_hex(keys)
        assert opened.address == derive_main_address(keys.spending_public)
        assert opened.created_at == 1700000000000

    def test_record_fields(self, keys) -> None:
        data = seal_wallet(keys, TEST_PASSWORD).to_dict()

        assert data["version"] == 1
        assert data["address"] == derive_main_address(keys.spending_public).checksum()
        assert data["metaAddress"] == meta_address_to_hex(keys)
        assert len(bytes.fromhex(data["salt"])) == 32
        assert len(bytes.fromhex(data["nonce"])) == 12
        assert isinstance(data["createdAt"], int)

    def test_private_keys_not_in_record(self, keys) -> None:
        text = seal_wallet(keys, TEST_PASSWORD).to_json()

        assert keys.spending_private.hex()[2:] not in text
        assert keys.viewing_private.hex()[2:] not in text

    def test_json_round_trip(self, keys) -> None:
        wallet = seal_wallet(keys, TEST_PASSWORD)
        assert EncryptedWallet.from_json(wallet.to_json()) == wallet

    def test_wrong_password(self, keys) -> None:
        wallet = seal_wallet(keys, TEST_PASSWORD)

        with pytest.raises(DecryptionFailedError):
            open_wallet(wallet, "wrong")

    def test_meta_address_mismatch(self, keys) -> None:
        """A record whose public meta-address disagrees with its keys is rejected."""
        data = seal_wallet(keys, TEST_PASSWORD).to_dict()
        data["metaAddress"] = meta_address_to_hex(generate_random_keys())

        with pytest.raises(WalletIntegrityCheckFailedError):
            open_wallet(EncryptedWallet.from_dict(data), TEST_PASSWORD)

    def test_meta_address_comparison_ignores_case(self, keys) -> None:
        data = seal_wallet(keys, TEST_PASSWORD).to_dict()
        data["metaAddress"] = "0x" + data["metaAddress"][2:].upper()

        assert open_wallet(EncryptedWallet.from_dict(data), TEST_PASSWORD).keys == keys

    def test_unsupported_version(self, keys) -> None:
        data = seal_wallet(keys, TEST_PASSWORD).to_dict()
        data["version"] = 2

        with pytest.raises(UnsupportedWalletVersionError, match="2"):
            EncryptedWallet.from_dict(data)

    @pytest.mark.parametrize("version", [True, 1.0, "1", None])
    def test_version_must_be_integer_one(self, keys, version) -> None:
        data = seal_wallet(keys, TEST_PASSWORD).to_dict()
        data["version"] = version

        with pytest.raises(UnsupportedWalletVersionError):
            EncryptedWallet.from_dict(data)

    @pytest.mark.parametrize("field", ["address", "metaAddress", "ciphertext", "salt", "nonce"])
    @pytest.mark.parametrize("value", [123, ["00"], {"hex": "00"}])
    def test_non_string_field(self, keys, field: str, value) -> None:
        data = seal_wallet(keys, TEST_PASSWORD).to_dict()
        data[field] = value

        with pytest.raises(InvalidWalletFormatError):
            EncryptedWallet.from_dict(data)

    def test_bad_address(self, keys) -> None:
        data = seal_wallet(keys, TEST_PASSWORD).to_dict()
        data["address"] = "0x1234"

        with pytest.raises(InvalidWalletFormatError):
            EncryptedWallet.from_dict(data)

    def test_address_is_normalized(self, keys) -> None:
        data = seal_wallet(keys, TEST_PASSWORD).to_dict()
        expected = data["address"]
        data["address"] = expected.lower()

        wallet = EncryptedWallet.from_dict(data)
        assert wallet.address == expected
        assert wallet.info().address == derive_main_address(keys.spending_public)

    @pytest.mark.parametrize("field", ["address", "metaAddress", "ciphertext", "salt", "nonce"])
    def test_missing_field(self, keys, field: str) -> None:
        data = seal_wallet(keys, TEST_PASSWORD).to_dict()
        del data[field]

        with pytest.raises(InvalidWalletFormatError):
            EncryptedWallet.from_dict(data)

    def test_bad_hex(self, keys) -> None:
        data = seal_wallet(keys, TEST_PASSWORD).to_dict()
        data["salt"] = "not hex"

        with pytest.raises(InvalidWalletFormatError):
            EncryptedWallet.from_dict(data)

    def test_bad_salt_length(self, keys) -> None:
        data = seal_wallet(keys, TEST_PASSWORD).to_dict()
        data["salt"] = "00" * 16

        with pytest.raises(InvalidWalletFormatError):
            EncryptedWallet.from_dict(data)

    def test_not_json(self) -> None:
        with pytest.raises(InvalidWalletFormatError):
            EncryptedWallet.from_json("{not json")

    def test_not_an_object(self) -> None:
        with pytest.raises(InvalidWalletFormatError):
            EncryptedWallet.from_json("[1, 2]")


class TestInMemoryWalletStorage:
    """Test in-memory storage."""

    def test_save_and_load(self, keys) -> None:
        storage = InMemoryWalletStorage()
        assert not storage.exists()

        storage.save(keys, TEST_PASSWORD)

        assert storage.exists()
        assert storage.load(TEST_PASSWORD).keys == keys

    def test_delete(self, keys) -> None:
        storage = InMemoryWalletStorage()
        storage.save(keys, TEST_PASSWORD)
        storage.delete()

        assert not storage.exists()
        with pytest.raises(WalletNotFoundError):
            storage.load(TEST_PASSWORD)


class TestFileWalletStorage:
    """Test file-based storage."""

    def test_save_and_load(self, storage, keys) -> None:
        saved = storage.save(keys, TEST_PASSWORD)
        loaded = storage.load(TEST_PASSWORD)

        assert storage.wallet_path.exists()
        assert loaded.keys == keys
        assert loaded.address == saved.address
        assert loaded.meta_address == saved.meta_address

    def test_load_from_new_instance(self, tmp_path, keys) -> None:
        FileWalletStorage(tmp_path).save(keys, TEST_PASSWORD)

        assert FileWalletStorage(tmp_path).load(TEST_PASSWORD).keys == keys

    def test_file_is_json(self, storage, keys) -> None:
        storage.save(keys, TEST_PASSWORD)
        data = json.loads(storage.wallet_path.read_text())

        assert data["version"] == 1
        assert data["metaAddress"] == meta_address_to_hex(keys)

    def test_load_missing(self, storage) -> None:
        with pytest.raises(WalletNotFoundError):
            storage.load(TEST_PASSWORD)

    def test_wrong_password(self, storage, keys) -> None:
        storage.save(keys, TEST_PASSWORD)

        with pytest.raises(DecryptionFailedError):
            storage.load("wrong")

    def test_tampered_meta_address(self, storage, keys) -> None:
        storage.save(keys, TEST_PASSWORD)
        data = json.loads(storage.wallet_path.read_text())
        data["metaAddress"] = meta_address_to_hex(generate_random_keys())
        storage.wallet_path.write_text(json.dumps(data))

        with pytest.raises(WalletIntegrityCheckFailedError):
            storage.load(TEST_PASSWORD)

    def test_info_without_password(self, storage, keys) -> None:
        assert storage.info() is None

        storage.save(keys, TEST_PASSWORD)
        info = storage.info()

        assert info is not None
        assert info.address == derive_main_address(keys.spending_public)
        assert info.meta_address == meta_address_to_hex(keys)

    def test_refuses_overwrite(self, storage, keys) -> None:
        storage.save(keys, TEST_PASSWORD)

        with pytest.raises(WalletExistsError):
            storage.save(generate_random_keys(), TEST_PASSWORD)

        assert storage.load(TEST_PASSWORD).keys == keys

    def test_overwrite(self, storage, keys) -> None:
        other = generate_random_keys()
        storage.save(keys, TEST_PASSWORD)
        storage.save(other, "new password", overwrite=True)

        assert storage.load("new password").keys == other

    def test_delete(self, storage, keys) -> None:
        storage.save(keys, TEST_PASSWORD)
        storage.delete()

        assert not storage.exists()
        assert not storage.wallet_path.exists()

    def test_delete_missing(self, storage) -> None:
        with pytest.raises(WalletNotFoundError):
            storage.delete()

    def test_no_temp_files_left(self, storage, keys) -> None:
        storage.save(keys, TEST_PASSWORD)
        storage.save(keys, TEST_PASSWORD, overwrite=True)

        assert [p.name for p in storage.wallet_path.parent.iterdir()] == ["wallet.json"]

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_permissions(self, storage, keys) -> None:
        storage.save(keys, TEST_PASSWORD)

        assert stat.S_IMODE(storage.wallet_path.stat().st_mode) == 0o600
        assert stat.S_IMODE(storage.wallet_path.parent.stat().st_mode) == 0o700


class TestExportImport:
    """Test wallet backups."""

    def test_export_and_import(self, tmp_path, keys) -> None:
        source = FileWalletStorage(tmp_path / "a")
        source.save(keys, TEST_PASSWORD)
        backup = tmp_path / "backup.json"
        source.export_to(backup)

        target = FileWalletStorage(tmp_path / "b")
        info = target.import_from(backup)

        assert info.meta_address == meta_address_to_hex(keys)
        assert target.load(TEST_PASSWORD).keys == keys

    def test_export_missing(self, storage, tmp_path) -> None:
        with pytest.raises(WalletNotFoundError):
            storage.export_to(tmp_path / "backup.json")

    def test_import_invalid_backup_writes_nothing(self, storage, tmp_path) -> None:
        backup = tmp_path / "backup.json"
        backup.write_text(json.dumps({"version": 1, "address": "0x00"}))

        with pytest.raises(InvalidWalletFormatError):
            storage.import_from(backup)
        assert not storage.exists()

    def test_import_unsupported_version(self, storage, tmp_path, keys) -> None:
        data = seal_wallet(keys, TEST_PASSWORD).to_dict()
        data["version"] = 99
        backup = tmp_path / "backup.json"
        backup.write_text(json.dumps(data))

        with pytest.raises(UnsupportedWalletVersionError):
            storage.import_from(backup)

    def test_import_refuses_overwrite(self, storage, tmp_path, keys) -> None:
        storage.save(keys, TEST_PASSWORD)
        backup = tmp_path / "backup.json"
        backup.write_text(seal_wallet(generate_random_keys(), TEST_PASSWORD).to_json())

        with pytest.raises(WalletExistsError):
            storage.import_from(backup)

        storage.import_from(backup, overwrite=True)
        assert storage.load(TEST_PASSWORD).keys != keys
