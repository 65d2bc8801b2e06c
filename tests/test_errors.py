import pytest

from clmm.errors import DexError, ErrorCode


def test_error_keeps_its_code():
    err = DexError(ErrorCode.LiquidityZero)
    assert err.code is ErrorCode.LiquidityZero


def test_error_text_names_code_and_message():
    err = DexError(ErrorCode.InvalidTimestamp)
    text = str(err)
    assert text.startswith("InvalidTimestamp")
    assert ErrorCode.InvalidTimestamp.message in text


def test_error_can_be_raised_and_caught_as_exception():
    err = DexError(ErrorCode.TickNotFound)
    with pytest.raises(DexError) as info:
        raise err
    assert info.value.code is ErrorCode.TickNotFound
    assert str(info.value) == str(err)


def test_non_code_argument_is_rejected():
    with pytest.raises(TypeError):
        DexError("LiquidityZero")


def test_messages_are_unique_and_nonempty():
    errors = [DexError(code) for code in ErrorCode]
    texts = [str(err) for err in errors]
    assert len(set(texts)) == len(texts)
    for err, text in zip(errors, texts):
        assert err.code.message
        assert err.code.message in text
        assert text.startswith(err.code.name)