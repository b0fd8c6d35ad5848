"""Property-based tests for getpronto using Hypothesis.

These tests check invariants of the MIME registry, upload source
detection, data URL parsing, redaction and the transform builder over a
wide range of generated inputs.
"""

from __future__ import annotations

import base64

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from getpronto.errors import GetProntoValidationError
from getpronto.images import ImageTransformer
from getpronto.mime import DEFAULT_ALLOWED_FILE_TYPES, OCTET_STREAM, MimeRegistry
from getpronto.models import ImageFit, ImageFormat, UploadSourceType
from getpronto.upload import detect_upload_source, parse_data_url
from getpronto.utils import redact

REGISTRY = MimeRegistry()

# ---------------------------------------------------------------------------
# Reusable strategies
# ---------------------------------------------------------------------------

_mime_st = st.sampled_from(sorted(DEFAULT_ALLOWED_FILE_TYPES))

_mime_token_st = st.text(
    alphabet="abcdefghijklmnopqrstuvwxyz0123456789", min_size=1, max_size=12,
)

# (setter name, args) pairs with values that are always valid.
_setter_st = st.one_of(
    st.tuples(
        st.just("resize"),
        st.tuples(
            st.integers(1, 5000),
            st.integers(1, 5000),
            st.sampled_from(list(ImageFit)),
        ),
    ),
    st.tuples(st.just("quality"), st.tuples(st.integers(1, 100))),
    st.tuples(st.just("blur"), st.tuples(st.floats(0.3, 1000, allow_nan=False))),
    st.tuples(st.just("rotate"), st.tuples(st.integers(-360, 360))),
    st.tuples(st.just("sharpen"), st.just(())),
    st.tuples(st.just("grayscale"), st.just(())),
    st.tuples(
        st.just("border"),
        st.tuples(st.integers(1, 50), st.from_regex(r"#?[0-9A-Fa-f]{6}", fullmatch=True)),
    ),
    st.tuples(
        st.just("crop"),
        st.tuples(
            st.integers(0, 4000),
            st.integers(0, 4000),
            st.integers(1, 4000),
            st.integers(1, 4000),
        ),
    ),
    st.tuples(st.just("format"), st.tuples(st.sampled_from(list(ImageFormat)))),
)


def _apply(calls):
    builder = ImageTransformer("file", None)
    for name, args in calls:
        getattr(builder, name)(*args)
    return builder.options


# ---------------------------------------------------------------------------
# MIME registry
# ---------------------------------------------------------------------------


class TestRegistryProperties:
    @given(st.text(max_size=60))
    def test_filename_inference_is_total(self, filename):
        mime = REGISTRY.mime_type_from_filename(filename)
        assert mime == OCTET_STREAM or REGISTRY.is_allowed(mime)

    @given(_mime_st)
    def test_extension_round_trip(self, mime):
        ext = REGISTRY.extension_from_mime_type(mime)
        assert REGISTRY.mime_type_from_filename(f"upload.{ext}") == mime

    @given(_mime_st, st.text(alphabet="abcdefghij-_", min_size=1, max_size=20))
    def test_every_extension_maps_back(self, mime, stem):
        for ext in DEFAULT_ALLOWED_FILE_TYPES[mime]:
            assert REGISTRY.mime_type_from_filename(stem + ext.upper()) == mime

    @given(_mime_token_st, _mime_token_st)
    def test_unknown_mime_gets_bin(self, kind, sub):
        mime = f"x-{kind}/x-{sub}"
        assert REGISTRY.extension_from_mime_type(mime) == "bin"


# ---------------------------------------------------------------------------
# Upload sources
# ---------------------------------------------------------------------------


class TestDetectionProperties:
    @given(st.text())
    def test_every_string_is_classified(self, value):
        source_type = detect_upload_source(value)
        if value.startswith("data:"):
            assert source_type == UploadSourceType.DATA_URL
        elif value.startswith(("http://", "https://")):
            assert source_type == UploadSourceType.REMOTE_URL
        else:
            assert source_type == UploadSourceType.LOCAL_PATH

    @given(st.binary())
    def test_bytes_are_byte_buffers(self, value):
        assert detect_upload_source(value) == UploadSourceType.BYTE_BUFFER

    @given(st.binary(max_size=512), _mime_token_st, _mime_token_st)
    def test_data_url_decodes_exact_bytes(self, content, kind, sub):
        encoded = base64.b64encode(content).decode("ascii")
        mime, decoded = parse_data_url(f"data:{kind}/{sub};base64,{encoded}")
        assert mime == f"{kind}/{sub}"
        assert decoded == content


# ---------------------------------------------------------------------------
# Redaction
# ---------------------------------------------------------------------------


class TestRedactProperties:
    @given(st.text(alphabet="0123456789", min_size=8, max_size=40))
    @settings(max_examples=50)
    def test_api_key_never_survives(self, digits):
        api_key = f"pk_{digits}"
        payload = {
            "Authorization": f"ApiKey {api_key}",
            "url": f"https://x/?k={api_key}",
            "nested": [{"note": api_key}],
        }
        result = redact(payload, api_key)
        assert api_key not in repr(result)


# ---------------------------------------------------------------------------
# Transform builder
# ---------------------------------------------------------------------------


class TestBuilderProperties:
    @given(st.lists(_setter_st, max_size=8, unique_by=lambda c: c[0]), st.randoms())
    def test_order_of_distinct_setters_is_irrelevant(self, calls, rnd):
        shuffled = list(calls)
        rnd.shuffle(shuffled)
        assert _apply(calls) == _apply(shuffled)

    @given(st.lists(_setter_st, max_size=10))
    def test_only_set_fields_are_serialized(self, calls):
        body = _apply(calls).to_dict()
        assert None not in body.values()
        assert set(body) <= {
            "w", "h", "fit", "q", "blur", "sharp", "gray", "rot", "border", "crop", "format",
        }

    @given(st.integers().filter(lambda q: q < 1 or q > 100))
    def test_out_of_range_quality_rejected(self, value):
        with pytest.raises(GetProntoValidationError):
            ImageTransformer("file", None).quality(value)

    @given(
        st.integers(1, 5000) | st.none(),
        st.integers(1, 5000) | st.none(),
    )
    def test_fit_recorded_only_with_a_dimension(self, width, height):
        opts = ImageTransformer("file", None).resize(width, height).options
        if width is None and height is None:
            assert opts.fit is None
        else:
            assert opts.fit == ImageFit.COVER
