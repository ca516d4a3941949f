"""
Prompt templates for the tailoring pipeline.

Templates are filled with str.format(), so literal JSON braces are doubled.
"""

# =============================================================================
# LANGUAGES
# =============================================================================

LANGUAGE_NAMES = {
    "en": "English",
    "fr": "French",
    "de": "German",
    "es": "Spanish",
    "it": "Italian",
    "pt": "Portuguese",
    "nl": "Dutch",
    "pl": "Polish",
    "sv": "Swedish",
    "da": "Danish",
    "no": "Norwegian",
    "fi": "Finnish",
}


def language_name(code: str) -> str:
    """Human-readable language name for an ISO 639-1 code (unknown codes upper-cased)."""
    return LANGUAGE_NAMES.get(code.lower(), code.upper())


# =============================================================================
# STAGE 1: KEYWORD EXTRACTION
# =============================================================================

KEYWORD_CATEGORIES = ("technical_skills", "soft_skills", "domain_terms", "action_verbs")

KEYWORD_EXTRACTION_TEMPLATE = """\
You analyze job descriptions and pull out the terminology a resume should echo
to pass Applicant Tracking System (ATS) screening.

## Rules
- Extract 20-30 terms in total, taken from the job description itself
- Include explicit terms and ones the text strongly implies
- Keep generic terms such as "team player" - ATS filters look for them too
- Merge near-duplicates, keeping the most specific wording

## Categories
1. technical_skills: languages, frameworks, tools, platforms (e.g. "Python", "AWS")
2. soft_skills: interpersonal and professional skills (e.g. "leadership")
3. domain_terms: industry concepts and practices (e.g. "microservices", "CI/CD")
4. action_verbs: verbs describing the responsibilities (e.g. "architected", "led")

## Output
Return ONLY a JSON object of this shape, with no markdown and no commentary:

{{
  "technical_skills": ["Python", "AWS"],
  "soft_skills": ["leadership", "communication"],
  "domain_terms": ["microservices", "agile"],
  "action_verbs": ["implemented", "optimized"]
}}

---

## Job Description:
{job_description}
"""

# =============================================================================
# STAGE 2: RELEVANCE SCORING
# =============================================================================

RESUME_SCORING_TEMPLATE = """\
You evaluate resumes. Score every item of the candidate's resume for relevance
to the job description below.

## Rules
- Score each item from 0 to 100
- Do not change, add, or remove resume content - only score it
- Reference items by their position in their list (work[0], projects[2], ...)
- For skills, number the keywords of all skill groups except "Languages"
  consecutively in document order, and echo the keyword as "name"
- Give a short reasoning for each score
- Add about 15 points to skills that the job description mentions

## Scale
- 90-100: directly matches a key requirement
- 70-89: related experience or transferable skills
- 50-69: general competency, no specific match
- 30-49: tangential, foundational knowledge only
- 0-29: little or no relevance

## Categories
work, projects, education, certificates, skills

## Output
Return ONLY a JSON object of this shape, with no markdown and no commentary:

{{
  "work": [{{"index": 0, "score": 85, "reasoning": "Python backend work matches the core stack"}}],
  "projects": [{{"index": 0, "score": 90, "reasoning": "ML project aligns with the team's focus"}}],
  "education": [{{"index": 0, "score": 75, "reasoning": "CS degree is a strong foundation"}}],
  "certificates": [{{"index": 0, "score": 80, "reasoning": "AWS certification matches cloud work"}}],
  "skills": [{{"index": 0, "name": "Python", "score": 95, "reasoning": "Primary language in the posting"}}]
}}

---

## Job Description:
{job_description}

---

## Resume Data:
```yaml
{resume_yaml}
```
"""

# =============================================================================
# STAGE 4: WORDING OPTIMIZATION
# =============================================================================

KEYWORD_OPTIMIZATION_TEMPLATE = """\
You are a resume writer who specializes in keyword optimization. Adapt the
wording of the resume below to the language of the job description without
changing any facts.

## Rules
- Keep the exact same YAML structure and field names
- Do not add or remove items; every entry must remain
- Do not change dates, company names, institution names, or titles
- Only rephrase descriptions, highlights, and skill wording
- Work the target keywords in where they are truthful and relevant
- Never invent experience or skills
- Write the content in {target_language}

## What to adapt
1. Descriptions: emphasize the job-relevant side of each entry
2. Skills: use the posting's exact spelling of a technology (e.g. "ReactJS")
3. Terminology: prefer the posting's specific verbs and terms
4. Emphasis: move the most relevant bullet points first

Return ONLY the optimized YAML, starting directly with the content. No markdown
code blocks, no explanations.

---

## Target Keywords:
{extracted_keywords}

---

## Job Description:
{job_description}

---

## Filtered Resume (already relevance-filtered):
```yaml
{filtered_yaml}
```
"""

# =============================================================================
# FALLBACK: SINGLE-PROMPT TAILORING
# =============================================================================

SINGLE_PROMPT_TAILORING_TEMPLATE = """\
You are a resume writer. Tailor the resume configuration below to the job
description while keeping the exact same YAML structure and field names.

## Rules
- Keep every section and field; do not empty sections
- Only change content inside existing fields
- Remove only projects that are clearly unrelated to the job
- Keep dates, company names, degree titles, institutions, and personal details
- Never invent experience or skills
- Rephrase responsibilities and summaries toward the job's focus
- Reorder skills so the posting's technologies come first
- Write the content in {target_language}

Return ONLY the tailored YAML, starting directly with the content. No markdown
code blocks, no explanations.

---

## Job Description:
{job_description}

---

## Base Resume Configuration:
```yaml
{resume_yaml}
```
"""
