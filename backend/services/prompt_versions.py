"""
Versioned resume-tailoring prompts.

Each version extends the previous one with a single instruction block, so
rolling back means pointing CURRENT_PROMPT_VERSION at an older entry.

VERSION HISTORY:
    v1.0.0 - Initial prompt
    v1.1.0 - LaTeX formatting guidelines and special character rules
    v1.2.0 - Mandatory professional summary section
    v1.3.0 - Keyword integration and missing-skills acknowledgment
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List


@dataclass
class GenerationOptions:
    include_cover_letter: bool = False
    include_standard_questions: bool = False
    custom_questions: List[str] = field(default_factory=list)


STANDARD_QUESTION = (
    "**Briefly (400 characters) explain why is this job your top choice "
    "and why would you be a good fit?**"
)

_INTRO = """You are an expert resume writer and LaTeX specialist. Your task is to help with job application materials based on a specific job offer.

**Job Offer Description:**
{job_offer}

**Original LaTeX Resume:**
{resume_latex}

**REQUIRED OUTPUT:**
Please provide your response in the following structured format with clear section markers:

===RESUME_START===
[Tailored LaTeX resume code here]
===RESUME_END==="""

_RESUME_INSTRUCTION = """

**Instructions:**
1. For the resume: Analyze the job offer to identify key skills, qualifications, and requirements. Modify the LaTeX resume to better align with the job requirements. Emphasize relevant skills and experiences. Reorder or rewrite sections to highlight the most relevant information. Keep the LaTeX structure and formatting intact. Ensure the resume remains professional and truthful."""

_KEYWORD_INTEGRATION = """

**KEYWORD INTEGRATION REQUIREMENTS:**
- **Extract and Use Exact Keywords**: Identify specific keywords, skills, and technologies mentioned in the job offer. Use these exact terms in the resume when relevant. For example, if the job offer mentions "React" and the resume has "React.js", include "React" in the resume to match the job offer terminology.
- **Missing Skills Acknowledgment**: When a required skill or keyword from the job offer is missing from the resume, add a statement expressing eagerness to learn. Include this in the Professional Summary or Skills section with phrases like "Eager to learn [specific skill]" or "Committed to developing expertise in [specific technology]".
- **Keyword Integration in Experience**: Incorporate relevant keywords and skills from the job offer into experience descriptions. For example, if the job offer mentions "Python", include "Python" in an experience that likely uses Python."""

_PROFESSIONAL_SUMMARY = """

**MANDATORY RESUME STRUCTURE REQUIREMENTS:**
- **Professional Summary**: If the resume does not have a "Professional Summary", "Summary", "Profile", or "Objective" section immediately after the heading/contact information, you MUST create one. This should be a 3-4 line compelling summary that:
  • Highlights the candidate's most relevant experience and skills for this specific job
  • Includes years of experience and key domain expertise
  • Mentions 2-3 most important technical skills or achievements that match the job requirements
  • Uses action-oriented language and quantifiable achievements where possible
  • Is tailored specifically to the job offer requirements
- Place this Professional Summary section immediately after the contact information/header and before any other sections like Skills, Experience, or Education
- Use the same LaTeX formatting style as other sections in the resume (typically \\section{Professional Summary})"""

_COVER_LETTER_INSTRUCTION = """

2. For the cover letter: Write a professional, compelling cover letter that specifically addresses this job opportunity.
   - Extract the candidate's name, contact information, and relevant details ONLY from the provided resume
   - Extract the company name, position title, and other details ONLY from the provided job offer
   - DO NOT use placeholder text like [Your Name], [Company Name], or [Platform]
   - If specific information is not available in the provided documents, simply omit those references rather than using placeholders
   - Write a complete, ready-to-use cover letter that requires no additional editing
   - Focus on relevant experience and skills mentioned in the resume that match the job requirements"""

_STANDARD_QUESTIONS_INSTRUCTION = """

3. For standard questions: Provide thoughtful, specific answers that demonstrate your enthusiasm for the role and showcase your relevant qualifications."""

_CUSTOM_QUESTIONS_INSTRUCTION = """

4. For custom questions: Answer each question thoroughly and professionally, relating your experience and qualifications to what the employer is asking."""

_BASE_RULES = """

**IMPORTANT:**
- Follow the exact format with section markers (===SECTION_START=== and ===SECTION_END===)
- Ensure all content is professional, truthful, and tailored to the specific job
- For the resume section, output ONLY the LaTeX code without additional commentary"""

_LATEX_RULES = """

**IMPORTANT LaTeX FORMATTING RULES:**
- Follow the exact format with section markers (===SECTION_START=== and ===SECTION_END===)
- Ensure all content is professional, truthful, and tailored to the specific job
- For the resume section, output ONLY the LaTeX code without additional commentary

**CRITICAL LaTeX SYNTAX GUIDELINES:**
- ALWAYS escape special characters in text content:
  • Use \\& instead of & when writing "Python & R" → "Python \\& R"
  • Use \\% instead of % for percentages: "95%" → "95\\%"
  • Use \\$ instead of $ for dollar amounts: "$50,000" → "\\$50,000"
  • Use \\# instead of # for hashtags or numbers: "#1 ranked" → "\\#1 ranked"
- DO NOT escape & in tabular environments (tables) - leave as & for column separation
- Ensure ALL brackets are properly matched: { } [ ] ( )
- Use \\textbf{} for bold text, \\textit{} for italic text, \\emph{} for emphasis
- Keep existing LaTeX commands and structure intact
- Maintain proper spacing with \\vspace{} commands as shown in the original
- Preserve all \\newcommand definitions and custom commands
- Keep consistent indentation and formatting style

**Examples of CORRECT LaTeX formatting:**
✓ "Experience with Python \\& R programming"
✓ "Achieved 95\\% accuracy improvement"
✓ "Salary expectation: \\$75,000"
✓ "\\textbf{Senior Developer} role"
✓ "\\begin{tabular}{l@{\\extracolsep{\\fill}}r} Name & Email \\\\ \\end{tabular}"

**Examples of INCORRECT LaTeX formatting:**
✗ "Experience with Python & R programming" (unescaped &)
✗ "Achieved 95% accuracy improvement" (unescaped %)
✗ "Salary expectation: $75,000" (unescaped $)
✗ "**Senior Developer** role" (markdown instead of LaTeX)
✗ Mismatched brackets like {text] or [text}"""

_SUMMARY_EXAMPLE = """

**Professional Summary Example Format:**
\\section{Professional Summary}
Experienced Software Engineer with 5+ years developing scalable web applications using Python \\& JavaScript. Proven track record of leading cross-functional teams and delivering projects 20\\% ahead of schedule. Expertise in machine learning, cloud architecture, and agile methodologies with strong focus on user experience and performance optimization."""


def _output_sections(options: GenerationOptions) -> str:
    parts = []
    if options.include_cover_letter:
        parts.append("\n\n===COVER_LETTER_START===\n[Professional cover letter here]\n===COVER_LETTER_END===")
    if options.include_standard_questions:
        parts.append(
            f"\n\n===STANDARD_QUESTIONS_START===\n{STANDARD_QUESTION}\n[Answer here]\n===STANDARD_QUESTIONS_END==="
        )
    if options.custom_questions:
        parts.append("\n\n===CUSTOM_QUESTIONS_START===")
        for number, question in enumerate(options.custom_questions, start=1):
            parts.append(f"\n**Custom Question {number}: {question}**\n[Answer here]")
        parts.append("\n===CUSTOM_QUESTIONS_END===")
    return "".join(parts)


def _optional_instructions(options: GenerationOptions) -> str:
    parts = []
    if options.include_cover_letter:
        parts.append(_COVER_LETTER_INSTRUCTION)
    if options.include_standard_questions:
        parts.append(_STANDARD_QUESTIONS_INSTRUCTION)
    if options.custom_questions:
        parts.append(_CUSTOM_QUESTIONS_INSTRUCTION)
    return "".join(parts)


def _builder(latex_rules: bool, professional_summary: bool, keyword_integration: bool):
    def build(job_offer: str, resume_latex: str, options: GenerationOptions) -> str:
        prompt = _INTRO.format(job_offer=job_offer, resume_latex=resume_latex)
        prompt += _output_sections(options)
        prompt += _RESUME_INSTRUCTION
        if keyword_integration:
            prompt += _KEYWORD_INTEGRATION
        if professional_summary:
            prompt += _PROFESSIONAL_SUMMARY
        prompt += _optional_instructions(options)
        prompt += _LATEX_RULES if latex_rules else _BASE_RULES
        if professional_summary:
            prompt += _SUMMARY_EXAMPLE
        return prompt

    return build


@dataclass(frozen=True)
class PromptVersion:
    version: str
    date: str
    description: str
    build_prompt: Callable[[str, str, GenerationOptions], str]


PROMPT_VERSIONS: Dict[str, PromptVersion] = {
    "v1.0.0": PromptVersion(
        version="v1.0.0",
        date="2025-01-10",
        description="Initial prompt version",
        build_prompt=_builder(latex_rules=False, professional_summary=False, keyword_integration=False),
    ),
    "v1.1.0": PromptVersion(
        version="v1.1.0",
        date="2025-01-17",
        description="Added LaTeX formatting guidelines and special character rules",
        build_prompt=_builder(latex_rules=True, professional_summary=False, keyword_integration=False),
    ),
    "v1.2.0": PromptVersion(
        version="v1.2.0",
        date="2025-01-24",
        description="Added requirement to create professional summary section if missing",
        build_prompt=_builder(latex_rules=True, professional_summary=True, keyword_integration=False),
    ),
    "v1.3.0": PromptVersion(
        version="v1.3.0",
        date="2025-01-31",
        description="Added keyword integration requirements and missing skills acknowledgment",
        build_prompt=_builder(latex_rules=True, professional_summary=True, keyword_integration=True),
    ),
}

CURRENT_PROMPT_VERSION = "v1.3.0"


def get_prompt_version(version: str) -> PromptVersion:
    try:
        return PROMPT_VERSIONS[version]
    except KeyError:
        raise ValueError(f"Prompt version {version} not found") from None


def get_available_versions() -> List[str]:
    return list(PROMPT_VERSIONS)


def build_prompt(
    job_offer: str,
    resume_latex: str,
    options: GenerationOptions,
    version: str = CURRENT_PROMPT_VERSION,
) -> str:
    return get_prompt_version(version).build_prompt(job_offer, resume_latex, options)
