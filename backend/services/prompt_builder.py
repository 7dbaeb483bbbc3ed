"""Prompt templates for the LLM extraction call."""

from models.schemas.raw_extraction import Hyperlink

SYSTEM_PROMPT = (
    "You are an expert resume parser. Extract ONLY information that is actually present "
    "in the provided text. Do NOT generate, invent, or create any fake data. If information "
    "is not found in the text, use null or empty arrays. Return valid JSON ONLY without any "
    "markdown formatting, code blocks, or additional text."
)

PROFILE_SCHEMA = """{
  "name": "Full Name",
  "email": "email@example.com",
  "phone": "phone number",
  "linkedinUrl": "LinkedIn profile URL",
  "githubUrl": "GitHub profile URL",
  "portfolioUrl": "Portfolio/website URL",
  "location": "City, State/Country",
  "title": "Current job title",
  "summary": "Professional summary/objective",
  "experience": [
    {
      "jobTitle": "Job Title",
      "company": "Company Name",
      "duration": "Start Date - End Date (raw string as it appears)",
      "startDate": "YYYY-MM (parsed from duration or dates in text)",
      "endDate": "YYYY-MM or Present (parsed from duration or dates in text)",
      "techUsed": ["Technology1", "Technology2"],
      "description": "Job description",
      "achievements": ["Achievement 1", "Achievement 2"]
    }
  ],
  "education": [
    {
      "degree": "Degree Type",
      "field": "Field of Study",
      "university": "University Name",
      "year": "Graduation Year",
      "percentage": "Percentage if available",
      "gpa": "GPA if available",
      "location": "University Location"
    }
  ],
  "projects": [
    {
      "name": "Project Name",
      "description": "Project description",
      "techUsed": ["Technology1", "Technology2"],
      "duration": "Project duration",
      "url": "Project URL if available",
      "achievements": ["Key achievement"]
    }
  ],
  "achievements": [
    {
      "title": "Achievement Title",
      "description": "Achievement description",
      "year": "Year",
      "organization": "Organization"
    }
  ],
  "certifications": [
    {
      "name": "Certification Name",
      "issuer": "Issuing Organization",
      "date": "Date obtained",
      "expiryDate": "Expiry date if applicable",
      "credentialId": "Credential ID if available",
      "url": "Certification URL if available"
    }
  ],
  "skills": ["Skill1", "Skill2"],
  "interests": ["Interest1", "Interest2"],
  "languages": ["Language1", "Language2"],
  "salary": "Expected or current salary",
  "availability": "Availability (e.g. 'Immediately', '2 weeks notice')",
  "remotePreference": "Remote preference (e.g. 'Remote', 'Hybrid', 'On-site')",
  "visaStatus": "Visa status (e.g. 'US Citizen', 'H1B', 'Green Card')"
}"""

DATE_RULES = """DATE EXTRACTION RULES:
1. Look for dates near company names (e.g. "Company Name    Dec 2023 - Feb 2025")
2. Parse month abbreviations: Jan=01, Feb=02, Mar=03, Apr=04, May=05, Jun=06, Jul=07, Aug=08, Sep=09, Oct=10, Nov=11, Dec=12
3. "Dec 2023 - Feb 2025" becomes duration="Dec 2023 - Feb 2025", startDate="2023-12", endDate="2025-02"
4. If the end date says "Present", "Current" or "Now", use endDate="Present"
5. Keep duration exactly as it appears in the text"""


def build_hyperlinks_section(hyperlinks: list[Hyperlink]) -> str:
    """List the document's real hyperlinks so the model uses them instead of guessing."""
    if not hyperlinks:
        return ""
    listed = "\n".join(f'- "{link.anchor_text}" -> {link.url}' for link in hyperlinks)
    return f"""HYPERLINKS FOUND IN THE DOCUMENT:
{listed}

- A hyperlink with text "LinkedIn" or a URL containing "linkedin.com" is the linkedinUrl
- A hyperlink with text "GitHub" or a URL containing "github.com" is the githubUrl
- Other hyperlinks (not LinkedIn/GitHub, not email) may be the portfolioUrl
- These are the ACTUAL URLs in the document: do not generate or construct URLs

"""


def build_extraction_prompt(text: str, hyperlinks: list[Hyperlink] | None = None) -> str:
    """User prompt for structured profile extraction."""
    return f"""Extract comprehensive information from this resume text and return it as a JSON object with the following structure:

CRITICAL: Only extract information that is actually present in the text below. Do NOT generate, invent, or create any fake data. If information is not found, use null or empty arrays.

{PROFILE_SCHEMA}

{DATE_RULES}

{build_hyperlinks_section(hyperlinks or [])}RESUME TEXT:
---
{text}
---

Extract all available information. If a field is not found, use null or an empty array.

URLS: LinkedIn and GitHub may appear as full URLs or as "LinkedIn: username" / "GitHub: username".
Only return URLs that actually appear in the resume text or in the hyperlinks above. Do NOT build URLs
from names, email addresses, or any other information. If no URL is found, use null.

Respond with ONLY valid JSON (no markdown, no code fences)."""
