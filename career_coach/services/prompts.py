"""Prompt templates for the generative service."""
from __future__ import annotations

ROADMAP_SYSTEM = "You are an expert career coach specializing in creating detailed roadmaps for tech professionals."

ROADMAP_USER = """
You are an expert career coach for software engineers and computer science professionals.
Create a detailed career roadmap for a candidate based on their resume analysis and target companies.

Resume Analysis: {resume_analysis}
Target Companies and Positions: {target_companies}
{job_requirements_block}

The roadmap should include a title, a brief description, an estimated timeline in months,
a difficulty score (1-10), an ordered sequence of milestones (projects, skills, certifications,
networking and other activities), alternative routes if applicable, and the reasoning behind
your recommendations.

Format your response as a JSON object with the following structure:
{{
  "title": "Roadmap title",
  "description": "Brief description",
  "estimatedTimelineMonths": number,
  "difficultyScore": number,
  "milestones": [
    {{
      "title": "Milestone title",
      "description": "Detailed description",
      "type": "project|certification|course|skill|job|internship|networking|education|other",
      "difficulty": "beginner|intermediate|advanced|expert",
      "timeEstimate": {{"amount": number, "unit": "days|weeks|months"}},
      "resources": [{{"title": "Resource title", "url": "Resource URL", "type": "article|video|course|book|documentation|tool|other"}}],
      "order": number,
      "dependencies": []
    }}
  ],
  "alternativeRoutes": [{{"title": "Alternative route title", "description": "Description", "milestones": []}}],
  "gptAnalysis": {{
    "reasoning": "Detailed explanation",
    "keyInsights": ["insight1"],
    "marketTrends": ["trend1"],
    "companyCulture": ["culture1"]
  }}
}}
"""

JOB_REQUIREMENTS_BLOCK = "Job Requirements from Recruiters: {job_requirements}"

COMPATIBILITY_SYSTEM = "You are an expert talent evaluator specializing in matching candidates to tech industry positions."

COMPATIBILITY_USER = """
Compare this candidate's profile with the job requirements and provide a match analysis.

Candidate Profile: {candidate_profile}
Job Requirements: {job_requirements}

Format your response as a JSON object with the following structure:
{{
  "matchScore": number between 0 and 100,
  "matchingStrengths": ["strength1"],
  "gaps": ["gap1"],
  "recommendations": ["recommendation1"],
  "estimatedTimeToClose": {{"amount": number, "unit": "weeks|months|years"}},
  "analysis": "detailed analysis as a string"
}}
"""

JOB_ANALYSIS_SYSTEM = "You are an expert at analyzing job descriptions and extracting structured requirements."

JOB_ANALYSIS_USER = """
Analyze this job description for a software engineering/computer science position and extract key requirements.

Job Description: {job_description}

Format your response as a JSON object with the following structure:
{{
  "requiredSkills": [{{"name": "skill name", "level": "beginner|intermediate|advanced|expert", "required": true}}],
  "preferredSkills": [{{"name": "skill name", "level": "beginner|intermediate|advanced|expert", "required": false}}],
  "experienceRequired": {{"min": number, "max": number}},
  "educationRequirements": [{{"degree": "degree type", "field": "field of study", "required": boolean}}],
  "responsibilities": ["responsibility1"],
  "companyCulture": ["culture1"]
}}
"""

TARGET_RECOMMENDATIONS_SYSTEM = "You are a career coach specializing in tech careers."

TARGET_RECOMMENDATIONS_USER = """
Generate specific recommendations for a candidate targeting {company} for a {position} position.
Based on the company culture and job requirements, what should the candidate prioritize in their roadmap?

Provide 3-5 recommendations with brief explanations, formatted as a JSON object:
{{"recommendations": [{{"title": "short title", "explanation": "why it matters"}}]}}
"""
