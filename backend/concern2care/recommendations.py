"""Tier-2 intervention suggestions from the hosted LLM.

Every public call returns usable text. When no API key is configured, or the
API call fails for any reason, a canned plan written in the same markdown
subset is returned instead so the formatter can always render something.
"""
from __future__ import annotations
import logging
import re
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .deepseek_client import DeepSeekClient, LLMError
from .settings import settings
from .textclean import sanitize_for_storage, truncate_with_notice


logger = logging.getLogger(__name__)


DISCLAIMER = (
	"IMPORTANT DISCLAIMER: These AI-generated recommendations are for informational purposes only "
	"and should not replace professional educational assessment. Please refer this student to your "
	"school's student support department for proper evaluation and vetting. All AI-generated suggestions "
	"must be reviewed and approved by qualified educational professionals before implementation."
)
MOCK_NO_KEY = "(No API key configured, returning mock data)"
MOCK_AUTH_FAILED = "(API authentication failed, returning mock data)"
MOCK_UNAVAILABLE = "(API service unavailable, returning mock data)"

EMPTY_RECOMMENDATIONS = "Unable to generate recommendations at this time."
EMPTY_ASSISTANCE = "Unable to generate follow-up assistance at this time."

URGENT_APPENDIX = """### **URGENT CASE - IMMEDIATE ACTION REQUIRED**

**Share this case with Student Support immediately:**
* Forward this concern and intervention plan to your school's student support team
* Schedule an urgent consultation with the counselor, social worker, or special education coordinator
* Document all interventions and student responses for the support team
* Consider immediate safety protocols if student welfare is at risk
* Escalate to administration if there is no improvement within 48-72 hours

**Contact your school's student support department today so this student receives coordinated care.**"""

_CHINESE_REQUEST = re.compile(r"chinese|中文|中国|翻译", re.IGNORECASE)

Source = Literal["api", "mock"]


class RecommendationRequest(BaseModel):
	student_first_name: str
	student_last_initial: str
	grade: str
	teacher_position: str = ""
	incident_date: str = ""
	location: str = ""
	concern_types: List[str] = Field(default_factory=list)
	other_concern_type: Optional[str] = None
	concern_description: str = ""
	severity_level: str = "moderate"
	actions_taken: List[str] = Field(default_factory=list)
	other_action_taken: Optional[str] = None

	# Differentiation profile
	has_iep: bool = False
	has_disability: bool = False
	disability_type: Optional[str] = None
	is_eal_learner: bool = False
	eal_proficiency: Optional[str] = None
	is_gifted: bool = False
	is_struggling: bool = False
	other_needs: Optional[str] = None

	# Extracted text of uploaded material
	assessment_content: Optional[str] = None
	lesson_plan_content: Optional[str] = None

	task_type: Optional[str] = None  # "differentiation" or intervention (default)
	language: Optional[str] = None


class FollowUpRequest(BaseModel):
	original_recommendations: str
	specific_question: str
	student_first_name: str
	student_last_initial: str
	grade: str
	concern_types: List[str] = Field(default_factory=list)
	severity_level: str = "moderate"
	language: Optional[str] = None


class RecommendationResult(BaseModel):
	recommendations: str
	disclaimer: str
	source: Source


class FollowUpResult(BaseModel):
	assistance: str
	disclaimer: str = ""
	source: Source


def _join_with_other(items: List[str], other: Optional[str], empty: str) -> str:
	if not items:
		return empty
	text = ", ".join(items)
	if other:
		text += f", {other}"
	return text


def build_differentiation_summary(req: RecommendationRequest) -> List[str]:
	info: List[str] = []
	if req.has_iep:
		info.append("Has IEP (Individualized Education Program)")
	if req.has_disability and req.disability_type:
		info.append(f"Diagnosed with: {req.disability_type}")
	if req.is_eal_learner and req.eal_proficiency:
		info.append(f"EAL Learner ({req.eal_proficiency} English proficiency)")
	if req.is_gifted:
		info.append("Identified as gifted/talented")
	if req.is_struggling:
		info.append("Currently struggling academically")
	if req.other_needs:
		info.append(f"Additional needs: {req.other_needs}")
	return info


def _differentiation_text(req: RecommendationRequest) -> str:
	info = build_differentiation_summary(req)
	return "; ".join(info) if info else "No specific learning needs documented"


def _target_language(language: Optional[str]) -> Optional[str]:
	if language and language.strip().lower() != "english":
		return language.strip()
	return None


def _prepared_materials(req: RecommendationRequest) -> tuple[str, str]:
	assessment = ""
	lesson_plan = ""
	if req.assessment_content:
		assessment = truncate_with_notice(req.assessment_content, settings.assessment_char_limit, "Document")
	if req.lesson_plan_content:
		lesson_plan = truncate_with_notice(req.lesson_plan_content, settings.lesson_plan_char_limit, "Content")
	return assessment, lesson_plan


def _student_block(req: RecommendationRequest) -> str:
	return (
		f"- Name: {req.student_first_name} {req.student_last_initial}\n"
		f"- Grade: {req.grade}\n"
		f"- Teacher: {req.teacher_position}\n"
		f"- Location: {req.location}"
	)


def _differentiation_prompt(req: RecommendationRequest, lesson_plan: str) -> str:
	profile = "\n".join(build_differentiation_summary(req)) or "No specific learning needs documented"
	if lesson_plan:
		return (
			"You are an educational differentiation specialist. Take the lesson plan below and produce a "
			"differentiated version adapted to this student's learning needs.\n\n"
			f"**Student Information:**\n{_student_block(req)}\n\n"
			f"**Student Learning Profile:**\n{profile}\n\n"
			f"**ORIGINAL LESSON PLAN TO DIFFERENTIATE:**\n{lesson_plan}\n\n"
			"Provide a complete, ready-to-use lesson plan covering differentiated learning objectives, adapted "
			"content delivery, differentiated activities, modified assessment methods, specific accommodations "
			"and implementation notes for the teacher."
		)
	return (
		"You are an educational specialist in differentiated instruction and Universal Design for Learning. "
		"Provide detailed, immediately implementable differentiation strategies.\n\n"
		f"**Student Information:**\n{_student_block(req)}\n\n"
		f"**Student Learning Profile:**\n{profile}\n\n"
		"Structure the answer with `### ` section headings and `* ` bullets covering: learning profile summary, "
		"content modifications, process modifications, product alternatives, learning environment, "
		"implementation timeline, progress monitoring, and collaboration with families and staff."
	)


def _intervention_prompt(req: RecommendationRequest, assessment: str, lesson_plan: str) -> str:
	concerns = _join_with_other(req.concern_types, req.other_concern_type, "Not specified")
	actions = _join_with_other(req.actions_taken, req.other_action_taken, "None documented")
	parts = [
		"You are an educational intervention specialist and instructional coach. Provide detailed, "
		"evidence-based Tier 2 interventions a classroom teacher can implement immediately.\n",
		"### Student Profile",
		f"* **Name**: {req.student_first_name} {req.student_last_initial}",
		f"* **Grade Level**: {req.grade}",
		f"* **Teacher**: {req.teacher_position}",
		f"* **Incident Date**: {req.incident_date}",
		f"* **Location**: {req.location}",
		f"* **Primary Concerns**: {concerns}",
		f"* **Severity Level**: {req.severity_level}",
		f"* **Previous Interventions**: {actions}",
		f"* **Learning Profile**: {_differentiation_text(req)}",
		f"* **Detailed Description**: {req.concern_description}",
	]
	if assessment:
		parts.append(
			"\n**UPLOADED ASSESSMENT DATA ANALYSIS REQUIRED**: analyze the data below and target the "
			f"documented needs rather than generic strategies.\n{assessment}"
		)
	if lesson_plan:
		parts.append(
			"\n**LESSON PLAN DIFFERENTIATION REQUIRED**: adapt the lesson plan below with modified "
			f"objectives, alternative activities and assessment accommodations.\n{lesson_plan}"
		)
	parts.append(
		"\n### Required Response Format\n"
		"Use `### ` headings, `**bold**` strategy names and `* ` bullets. Cover: student analysis, "
		"intervention framework, immediate action plan (days 1-14), short-term support (weeks 3-8), "
		"long-term skill development (weeks 9-16), progress monitoring, collaboration plan, escalation "
		"protocols and resources. Include timing, materials and success criteria for every strategy."
	)
	return "\n".join(parts)


def build_prompt(req: RecommendationRequest) -> str:
	assessment, lesson_plan = _prepared_materials(req)
	if req.task_type == "differentiation":
		prompt = _differentiation_prompt(req, lesson_plan)
	else:
		prompt = _intervention_prompt(req, assessment, lesson_plan)
	language = _target_language(req.language)
	if language:
		prompt += (
			f"\n\n**IMPORTANT LANGUAGE REQUIREMENT: Provide all recommendations, strategies and content in "
			f"{language}, including headers, implementation steps and materials.**"
		)
	return prompt


def build_system_prompt(language: Optional[str] = None) -> str:
	base = (
		"You are a highly trained educational intervention specialist with expertise in evidence-based "
		"practices, special education law, and research-backed classroom strategies. Provide research-backed "
		"intervention strategies with implementation details, materials lists, progress monitoring tools, "
		"and timeline expectations."
	)
	target = _target_language(language)
	if target:
		base += f" You are fluent in {target}; all content must be in {target}."
	return base


def mock_recommendations(req: RecommendationRequest) -> str:
	name = f"{req.student_first_name} {req.student_last_initial}."
	if req.task_type == "differentiation":
		return f"""### Differentiation Strategies for {name}

**Student Learning Profile Summary**
{req.student_first_name} would benefit from multi-modal instruction, structured supports and flexible ways to show learning.

### Content Modifications
* **Chunked delivery**: break lessons into 10-15 minute segments with visual organizers
* **Multi-level materials**: offer the same content at three reading levels
* **Vocabulary pre-teaching**: introduce key terms with visuals and real-world examples

### Process Modifications
* **Think-aloud modeling**: demonstrate problem solving step by step
* **Wait time**: allow 5-7 seconds of processing before expecting a response
* **Peer buddy**: pair with a supportive classmate for collaborative tasks

### Product Alternatives
* Oral presentations, portfolios or digital projects in place of written tasks
* Choice boards offering several ways to demonstrate mastery

### Implementation Timeline
* **Weeks 1-2**: set up seating, visual supports and baseline data collection
* **Weeks 3-6**: introduce scaffolds and assistive technology, adjust from data
* **Ongoing**: review strategies monthly and share progress with the family"""

	concerns = ", ".join(req.concern_types) or "the reported concerns"
	assessment, _ = _prepared_materials(req)
	assessment_note = ""
	if assessment:
		excerpt = assessment[:800] + ("..." if len(assessment) > 800 else "")
		assessment_note = (
			"\n\n**Based on uploaded assessment data, the following needs have been identified:**\n"
			f"{excerpt}"
		)
	return f"""### Assessment Summary

Based on the {req.severity_level} level concerns related to {concerns} for {name} (Grade {req.grade}), the following Tier 2 interventions are recommended for {req.location or "the classroom"}.{assessment_note}

### Immediate Interventions (1-2 weeks)

**1. Structured Check-In System**
* Implementation: daily 2-minute check-in at the start of class
* Expected outcome: earlier identification of issues
* Materials needed: a simple check-in form

**2. Clear Expectations and Visual Supports**
* Implementation: visual schedule and expectations chart
* Timeline: in place within 3 days

### Short-term Strategies (2-6 weeks)

**3. Targeted Skill Building**
* Implementation: 15-minute focused sessions **3x per week**
* Timeline: 4-6 week cycle with weekly data review

**4. Peer Support System**
* Pair the student with a trained peer mentor and check in weekly

### Progress Monitoring
* Weekly data collection on target behaviors and skills
* Bi-weekly review of intervention effectiveness

### When to Escalate
* No improvement after 4-6 weeks of consistent intervention
* Behaviors escalate in frequency or intensity
* The student expresses safety concerns"""


def mock_follow_up(req: FollowUpRequest) -> str:
	return f"""### Direct Answer

Thank you for your question: "{req.specific_question}"

Here is guidance for putting the recommendations for {req.student_first_name} {req.student_last_initial}. into practice.

### Implementation Steps

**Step 1: Preparation (Days 1-2)**
* Gather materials and prepare visual aids
* Brief any support staff involved

**Step 2: Introduction (Days 3-5)**
* Introduce the intervention and model the expected skill

**Step 3: Implementation (Week 2+)**
* Implement daily, monitor the response and document progress

### Troubleshooting
* **If the student resists**: check expectations and increase reinforcement
* **If no progress is seen**: review implementation fidelity and consult the support team

### When to Seek Additional Support
* No improvement after 3-4 weeks of consistent implementation
* Safety concerns or escalating behaviors"""


def _with_urgent_appendix(text: str, severity_level: str) -> str:
	if severity_level == "urgent":
		return f"{text}\n\n{URGENT_APPENDIX}"
	return text


def _mock_result(req: RecommendationRequest, reason: str) -> RecommendationResult:
	text = sanitize_for_storage(mock_recommendations(req)) or ""
	return RecommendationResult(
		recommendations=_with_urgent_appendix(text, req.severity_level),
		disclaimer=f"{DISCLAIMER} {reason}",
		source="mock",
	)


async def generate_recommendations(
	req: RecommendationRequest,
	client: Optional[DeepSeekClient] = None,
) -> RecommendationResult:
	logger.info(
		"Generating recommendations for %s %s (task=%s, severity=%s)",
		req.student_first_name, req.student_last_initial, req.task_type or "intervention", req.severity_level,
	)
	owns_client = client is None
	if client is None:
		if not settings.deepseek_api_key:
			logger.info("No LLM API key configured; returning mock recommendations")
			return _mock_result(req, MOCK_NO_KEY)
		client = DeepSeekClient()
	try:
		raw = await client.chat(build_system_prompt(req.language), build_prompt(req))
	except LLMError as err:
		if err.status_code == 401:
			logger.warning("LLM authentication failed; falling back to mock recommendations")
			return _mock_result(req, MOCK_AUTH_FAILED)
		logger.warning("LLM call failed (%s); falling back to mock recommendations", err)
		return _mock_result(req, MOCK_UNAVAILABLE)
	finally:
		if owns_client:
			await client.aclose()
	text = sanitize_for_storage(raw) or EMPTY_RECOMMENDATIONS
	return RecommendationResult(
		recommendations=_with_urgent_appendix(text, req.severity_level),
		disclaimer=DISCLAIMER,
		source="api",
	)


def build_follow_up_prompt(req: FollowUpRequest) -> str:
	concerns = ", ".join(req.concern_types) or "Not specified"
	prompt = (
		"You are an educational intervention specialist with expertise in implementation science. "
		"Provide research-backed implementation guidance for Tier 2 interventions."
	)
	if _wants_chinese(req):
		prompt += (
			"\n\n**IMPORTANT LANGUAGE REQUIREMENT: Provide your entire response in simplified Chinese, "
			"including headers, implementation steps and materials.**"
		)
	prompt += (
		"\n\nContext:\n"
		f"- Student: {req.student_first_name} {req.student_last_initial}.\n"
		f"- Grade: {req.grade}\n"
		f"- Concern Types: {concerns}\n"
		f"- Severity Level: {req.severity_level}\n\n"
		f"Original AI-Generated Recommendations:\n{req.original_recommendations}\n\n"
		f"Teacher's Specific Question/Request for Additional Assistance:\n{req.specific_question}\n\n"
		"Answer the question directly, then give implementation steps, practical tips, resources needed, "
		"timeline considerations, troubleshooting, progress monitoring and when to seek additional support. "
		"Use `### ` headings and `* ` bullets."
	)
	return prompt


def _wants_chinese(req: FollowUpRequest) -> bool:
	if _CHINESE_REQUEST.search(req.specific_question):
		return True
	return (req.language or "").strip().lower() == "chinese"


async def follow_up_assistance(
	req: FollowUpRequest,
	client: Optional[DeepSeekClient] = None,
) -> FollowUpResult:
	owns_client = client is None
	if client is None:
		if not settings.deepseek_api_key:
			logger.info("No LLM API key configured; returning mock follow-up assistance")
			return FollowUpResult(assistance=mock_follow_up(req), source="mock")
		client = DeepSeekClient()
	language = "Chinese" if _wants_chinese(req) else req.language
	try:
		raw = await client.chat(build_system_prompt(language), build_follow_up_prompt(req))
	except LLMError as err:
		logger.warning("Follow-up LLM call failed (%s); falling back to mock assistance", err)
		return FollowUpResult(assistance=mock_follow_up(req), source="mock")
	finally:
		if owns_client:
			await client.aclose()
	return FollowUpResult(assistance=sanitize_for_storage(raw) or EMPTY_ASSISTANCE, source="api")
