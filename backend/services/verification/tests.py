import base64
import io
from types import SimpleNamespace
from unittest.mock import patch

import pytesseract
from django.test import SimpleTestCase
from PIL import Image

from services.exceptions import InvalidInputError, OcrProcessingFailedError, OcrUnavailableError
from services.verification import matcher, registry
from services.verification.engine import check_document, verify_provider_documents, verify_rider_documents
from services.verification.extractor import (
	DisabledExtractor,
	OcrExtractionError,
	TesseractExtractor,
	TextExtractor,
	extract_aadhaar_number,
	extract_rc_number,
	parse_license_fields,
)


LICENSE_TEXT = (
	"INDIAN UNION DRIVING LICENCE\n"
	"Name: John Doe\n"
	"DL Number: DL9876543210\n"
	"DOB: 1990-05-15\n"
	"Valid Till: 2030-05-15\n"
)


class StaticExtractor(TextExtractor):
	"""Returns canned text (or raises) and records how often it was asked."""

	def __init__(self, text="", error=None):
		self.text = text
		self.error = error
		self.calls = 0

	def extract_text(self, payload):
		self.calls += 1
		if self.error is not None:
			raise self.error
		return self.text


class MatcherTests(SimpleTestCase):
	def test_identical_identifiers_match_with_full_score(self):
		for check, value in (
			(matcher.match_aadhaar, "123456789012"),
			(matcher.match_rc_number, "DL12AB1234"),
			(matcher.match_license_number, "DL9876543210"),
		):
			result = check(value, value)
			self.assertTrue(result.is_match)
			self.assertEqual(result.score, 1.0)

	def test_empty_side_never_matches(self):
		result = matcher.match_aadhaar("", "123456789012")
		self.assertFalse(result.is_match)
		self.assertEqual(result.score, 0)

		result = matcher.match_rc_number("DL12AB1234", None)
		self.assertFalse(result.is_match)
		self.assertEqual(result.score, 0)

	def test_separators_only_input_counts_as_empty(self):
		result = matcher.match_aadhaar("---- ----", "123456789012")
		self.assertFalse(result.is_match)
		self.assertEqual(result.normalized_input, "")

	def test_aadhaar_tolerates_one_substitution_but_not_two(self):
		one_off = matcher.match_aadhaar("123456789012", "123456789013")
		self.assertTrue(one_off.is_match)
		self.assertEqual(one_off.score, 0.92)

		two_off = matcher.match_aadhaar("123456789012", "123456789099")
		self.assertFalse(two_off.is_match)
		self.assertEqual(two_off.score, 0.83)

	def test_aadhaar_ignores_spacing(self):
		result = matcher.match_aadhaar("1234 5678 9012", "123456789012")
		self.assertTrue(result.is_match)
		self.assertEqual(result.normalized_input, "123456789012")

	def test_rc_normalises_case_and_separators(self):
		result = matcher.match_rc_number("dl-12 ab 1234", "DL12AB1234")
		self.assertTrue(result.is_match)
		self.assertEqual(result.normalized_input, "DL12AB1234")

	def test_dispatch_rejects_unknown_document_class(self):
		with self.assertRaises(ValueError):
			matcher.match("passport", "A1", "A1")

	def test_levenshtein(self):
		self.assertEqual(matcher.levenshtein("kitten", "sitting"), 3)
		self.assertEqual(matcher.levenshtein("", "abc"), 3)
		self.assertEqual(matcher.similarity("", ""), 1.0)

	def test_mismatch_summary(self):
		miss = matcher.match_rc_number("DL12AB1234", "UP56CD5678")
		hint = matcher.mismatch_summary("RC number", "DL12AB1234", "UP56CD5678", miss)
		self.assertIn("RC number mismatch", hint)
		self.assertIn("UP56CD5678", hint)

		hit = matcher.match_rc_number("DL12AB1234", "DL12AB1234")
		self.assertEqual(matcher.mismatch_summary("RC number", "DL12AB1234", "DL12AB1234", hit), "")
		self.assertEqual(matcher.mismatch_summary("RC number", "", "DL12AB1234", miss), "")


class RegistryTests(SimpleTestCase):
	def test_rc_lookups(self):
		valid = registry.lookup(registry.RC, "DL12AB1234")
		self.assertTrue(valid.is_valid)
		self.assertEqual(valid.claimed_owner_name, "John Doe")

		self.assertFalse(registry.lookup(registry.RC, "UP56CD5678").is_valid)
		self.assertIs(registry.lookup(registry.RC, "XX00YY0000"), registry.UNKNOWN)

	def test_lookup_trims_identifier(self):
		self.assertTrue(registry.is_valid(registry.RC, "  DL12AB1234 "))

	def test_unknown_class_and_empty_identifier(self):
		self.assertFalse(registry.lookup("passport", "DL12AB1234").is_valid)
		self.assertFalse(registry.lookup(registry.AADHAR, "").is_valid)
		self.assertFalse(registry.lookup(registry.AADHAR, None).is_valid)

	def test_license_record_details(self):
		record = registry.lookup(registry.LICENSE, "DL9876543210")
		self.assertEqual(record.details["validity"], "2030-05-15")


class ExtractorPatternTests(SimpleTestCase):
	def test_parse_labelled_license_text(self):
		fields = parse_license_fields(LICENSE_TEXT)
		self.assertEqual(fields, {
			"name": "John Doe",
			"license_number": "DL9876543210",
			"dob": "1990-05-15",
			"validity": "2030-05-15",
		})

	def test_parse_falls_back_to_dates_near_hints(self):
		fields = parse_license_fields("Date of birth 15/05/1990\nExpires on 15/05/2030")
		self.assertEqual(fields["dob"], "15/05/1990")
		self.assertEqual(fields["validity"], "15/05/2030")
		self.assertIsNone(fields["name"])
		self.assertIsNone(fields["license_number"])

	def test_parse_empty_text(self):
		self.assertEqual(set(parse_license_fields(None).values()), {None})

	def test_identifier_patterns(self):
		self.assertEqual(extract_aadhaar_number("Aadhaar 1234 5678 9012 issued"), "123456789012")
		self.assertEqual(extract_rc_number("Reg no dl12ab1234"), "DL12AB1234")
		self.assertIsNone(extract_aadhaar_number("no number here"))

	def test_disabled_extractor_is_unavailable(self):
		with self.assertRaises(OcrUnavailableError):
			DisabledExtractor().extract_text("anything")


class ProviderVerificationTests(SimpleTestCase):
	def setUp(self):
		self.user = SimpleNamespace(pk=1, name="John Doe")
		self.submission = {
			"rc_number": "DL12AB1234",
			"insurance_number": "INS987654321",
			"aadhar_number": "123456789012",
			"license_number": "DL9876543210",
			"license_photo": "data:image/png;base64,AAAA",
		}

	def test_all_documents_verified(self):
		outcome = verify_provider_documents(self.user, self.submission, extractor=StaticExtractor(LICENSE_TEXT))

		self.assertEqual(outcome.flags, {
			"rc_verified": True,
			"insurance_verified": True,
			"aadhar_verified": True,
			"license_verified": True,
		})
		self.assertTrue(outcome.ocr_attempted)
		self.assertEqual(outcome.as_fields()["ocr_extracted_name"], "John Doe")

	def test_ocr_name_mismatch_only_fails_license(self):
		text = LICENSE_TEXT.replace("John Doe", "Johnny Doe")
		outcome = verify_provider_documents(self.user, self.submission, extractor=StaticExtractor(text))

		self.assertFalse(outcome.flags["license_verified"])
		self.assertTrue(outcome.flags["rc_verified"])
		self.assertEqual(outcome.extracted["ocr_extracted_name"], "Johnny Doe")

	def test_name_comparison_is_case_sensitive(self):
		text = LICENSE_TEXT.replace("John Doe", "JOHN DOE")
		outcome = verify_provider_documents(self.user, self.submission, extractor=StaticExtractor(text))
		self.assertFalse(outcome.flags["license_verified"])

	def test_license_number_allows_ocr_misread(self):
		text = LICENSE_TEXT.replace("DL9876543210", "DL987654321O")
		outcome = verify_provider_documents(self.user, self.submission, extractor=StaticExtractor(text))
		self.assertTrue(outcome.flags["license_verified"])

	def test_registry_invalid_license_fails(self):
		self.user.name = "Jane Smith"
		self.submission["license_number"] = "DL0123456789"
		text = "Name: Jane Smith\nDL Number: DL0123456789\n"
		outcome = verify_provider_documents(self.user, self.submission, extractor=StaticExtractor(text))
		self.assertFalse(outcome.flags["license_verified"])

	def test_unknown_identifiers_are_unverified(self):
		self.submission.update(rc_number="ZZ99ZZ9999", insurance_number="INS123456789", aadhar_number="111122223333")
		outcome = verify_provider_documents(self.user, self.submission, extractor=StaticExtractor(LICENSE_TEXT))
		self.assertFalse(outcome.flags["rc_verified"])
		self.assertFalse(outcome.flags["insurance_verified"])
		self.assertFalse(outcome.flags["aadhar_verified"])

	def test_unavailable_ocr_leaves_license_unverified(self):
		outcome = verify_provider_documents(self.user, self.submission, extractor=DisabledExtractor())

		self.assertFalse(outcome.flags["license_verified"])
		self.assertTrue(outcome.flags["rc_verified"])
		self.assertFalse(outcome.ocr_attempted)
		self.assertIsNone(outcome.extracted["ocr_extracted_name"])

	def test_ocr_failure_rejects_submission(self):
		extractor = StaticExtractor(error=OcrExtractionError("bad image"))
		with self.assertRaises(OcrProcessingFailedError):
			verify_provider_documents(self.user, self.submission, extractor=extractor)

	def test_blank_ocr_text_rejects_submission(self):
		with self.assertRaises(OcrProcessingFailedError):
			verify_provider_documents(self.user, self.submission, extractor=StaticExtractor("   \n"))

	def test_no_license_photo_skips_ocr(self):
		self.submission["license_photo"] = ""
		extractor = StaticExtractor(LICENSE_TEXT)
		outcome = verify_provider_documents(self.user, self.submission, extractor=extractor)

		self.assertEqual(extractor.calls, 0)
		self.assertFalse(outcome.flags["license_verified"])


def png_payload():
	buffer = io.BytesIO()
	Image.new("RGB", (8, 8), "white").save(buffer, format="PNG")
	return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


class TesseractExtractorTests(SimpleTestCase):
	def setUp(self):
		self.user = SimpleNamespace(pk=1, name="John Doe")
		self.extractor = TesseractExtractor(timeout=5, languages="eng")
		self.submission = {
			"rc_number": "DL12AB1234",
			"insurance_number": "INS987654321",
			"aadhar_number": "123456789012",
			"license_number": "DL9876543210",
			"license_photo": png_payload(),
		}

	def verify(self):
		return verify_provider_documents(self.user, self.submission, extractor=self.extractor)

	@patch("services.verification.extractor.pytesseract.image_to_string")
	def test_reads_license_text(self, mock_ocr):
		mock_ocr.return_value = LICENSE_TEXT
		outcome = self.verify()

		self.assertTrue(outcome.flags["license_verified"])
		self.assertEqual(mock_ocr.call_args.kwargs, {"lang": "eng", "timeout": 5})

	@patch("services.verification.extractor.pytesseract.image_to_string")
	def test_timeout_leaves_license_unverified(self, mock_ocr):
		mock_ocr.side_effect = RuntimeError("Tesseract process timeout")
		outcome = self.verify()

		self.assertFalse(outcome.flags["license_verified"])
		self.assertTrue(outcome.flags["rc_verified"])
		self.assertFalse(outcome.ocr_attempted)

	@patch("services.verification.extractor.pytesseract.image_to_string")
	def test_missing_binary_leaves_license_unverified(self, mock_ocr):
		mock_ocr.side_effect = pytesseract.TesseractNotFoundError()
		outcome = self.verify()

		self.assertFalse(outcome.flags["license_verified"])
		self.assertFalse(outcome.ocr_attempted)

	@patch("services.verification.extractor.pytesseract.image_to_string")
	def test_tesseract_error_rejects_submission(self, mock_ocr):
		mock_ocr.side_effect = pytesseract.TesseractError(1, "Image too small to scale")
		with self.assertRaises(OcrProcessingFailedError):
			self.verify()

	@patch("services.verification.extractor.pytesseract.image_to_string")
	def test_non_image_payload_rejects_submission(self, mock_ocr):
		self.submission["license_photo"] = base64.b64encode(b"definitely not a picture").decode("ascii")
		with self.assertRaises(OcrProcessingFailedError):
			self.verify()
		mock_ocr.assert_not_called()

	@patch("services.verification.extractor.pytesseract.image_to_string")
	def test_bad_base64_rejects_submission(self, mock_ocr):
		self.submission["license_photo"] = "data:image/png;base64,%%%not-base64%%%"
		with self.assertRaises(OcrProcessingFailedError):
			self.verify()
		mock_ocr.assert_not_called()


class RiderVerificationTests(SimpleTestCase):
	def test_rider_aadhaar_flag(self):
		user = SimpleNamespace(pk=2, name="John Doe")
		self.assertTrue(verify_rider_documents(user, {"aadhar_number": "123456789012"}).flags["aadhar_verified"])
		self.assertFalse(verify_rider_documents(user, {"aadhar_number": "111122223333"}).flags["aadhar_verified"])


class DocumentCheckTests(SimpleTestCase):
	def test_aadhaar_hint_match(self):
		result = check_document("aadhar", "1234 5678 9012", "photo", extractor=StaticExtractor("1234 5678 9013"))

		self.assertEqual(result.extracted_identifier, "123456789013")
		self.assertTrue(result.result.is_match)
		self.assertEqual(result.hint, "")

	def test_rc_hint_mismatch(self):
		result = check_document("rc", "DL12AB1234", "photo", extractor=StaticExtractor("UP56CD5678"))

		self.assertFalse(result.result.is_match)
		self.assertIn("Extracted: UP56CD5678", result.hint)

	def test_unsupported_class(self):
		with self.assertRaises(InvalidInputError):
			check_document("insurance", "INS987654321", "photo", extractor=StaticExtractor("x"))

	def test_unavailable_ocr_is_reported(self):
		with self.assertRaises(OcrUnavailableError):
			check_document("rc", "DL12AB1234", "photo", extractor=DisabledExtractor())
