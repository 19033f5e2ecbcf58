"""Tests for point id helpers."""

from second_brain.services.point_ids import document_point_id, new_chunk_point_id


def test_document_point_id_known_values() -> None:
    assert document_point_id("") == 0
    assert document_point_id("a") == 97
    assert document_point_id("ab") == 3105
    assert document_point_id("hello") == 99162322


def test_document_point_id_is_deterministic_and_non_negative() -> None:
    document_id = "report_pdf_lz3k9q2a_x81fz0"
    assert document_point_id(document_id) == document_point_id(document_id)
    assert document_point_id(document_id) >= 0
    # Overflowing hashes fold into 32 bits
    assert document_point_id("a much longer identifier than fits in 32 bits") < 2**31 + 1


def test_document_point_id_counts_utf16_code_units() -> None:
    # U+1F600 is a surrogate pair: 0xD83D, 0xDE00
    assert document_point_id("\U0001F600") == 0xD83D * 31 + 0xDE00


def test_document_point_id_known_collision() -> None:
    assert document_point_id("Aa") == document_point_id("BB") == 2112


def test_new_chunk_point_ids_are_distinct_63_bit_integers() -> None:
    ids = {new_chunk_point_id() for _ in range(1000)}
    assert len(ids) == 1000
    assert all(0 <= point_id < 2**63 for point_id in ids)
