from models.schemas.candidate_profile import (
    UNKNOWN_NAME,
    Achievement,
    CandidateProfile,
    Certification,
    Education,
    Experience,
    Project,
)
from services.confidence import llm_confidence, regex_confidence
from services.vocabulary import Vocabulary

CORE_FIELDS = dict(
    name="Jane Smith",
    email="jane.smith@example.com",
    phone="(415) 555-0142",
    title="Senior Software Engineer",
    summary="Backend engineer.",
    experience=[Experience(job_title="Engineer", company="Acme Corp")],
    skills=["Python"],
    education=[Education(degree="BSc", university="State University")],
)


class TestLLMConfidence:
    def test_full_profile_with_linkedin_scores_100(self):
        profile = CandidateProfile(**CORE_FIELDS, linkedin_url="https://linkedin.com/in/janesmith")
        assert llm_confidence(profile) == 100

    def test_empty_profile_scores_0(self):
        assert llm_confidence(CandidateProfile()) == 0

    def test_unknown_name_not_counted(self):
        assert llm_confidence(CandidateProfile(name=UNKNOWN_NAME)) == 0
        assert llm_confidence(CandidateProfile(name="Jane Smith")) == 15

    def test_bonus_records_without_links(self):
        profile = CandidateProfile(
            **CORE_FIELDS,
            projects=[Project(name="Payments")],
            certifications=[Certification(name="AWS SA")],
            achievements=[Achievement(title="Hackathon winner")],
        )
        assert llm_confidence(profile) == 98

    def test_core_only(self):
        assert llm_confidence(CandidateProfile(**CORE_FIELDS)) == 90


class TestRegexConfidence:
    def test_sample_resume(self, sample_resume):
        # four section words, an email and a linkedin mention
        assert regex_confidence(sample_resume) == 75

    def test_digit_run_counts_as_phone(self):
        assert regex_confidence("Call 9876543210") == 10

    def test_capped_at_100(self):
        text = "experience education skills projects certifications a@b.co 9876543210 linkedin"
        assert regex_confidence(text) == 100

    def test_empty_text(self):
        assert regex_confidence("") == 0

    def test_uses_supplied_vocabulary(self):
        vocab = Vocabulary(section_keywords=["berufserfahrung"])
        assert regex_confidence("Berufserfahrung", vocab) == 15
