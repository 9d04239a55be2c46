# prompt sent to the llm ahead of the extracted document text
CURRICULUM_GENERATION_PROMPT = """
You are a curriculum design assistant. Analyze the following document content and generate a structured curriculum.

The curriculum must follow this exact hierarchy:
- Curriculum (top level)
  - Modules (main sections)
    - Topics (subsections within modules)
      - Lessons (individual learning units within topics)

IMPORTANT RULES:
1. If the document mentions modules but lacks topics, generate appropriate topics for each module.
2. If topics lack lessons, generate at least 2-3 relevant lessons per topic.
3. Each item should have a clear, descriptive title.
4. Descriptions should be 1-2 sentences explaining the purpose.
5. Use the document's language/terminology where possible.

Return ONLY valid JSON in this exact format (no markdown, no code blocks):
{
  "title": "Curriculum Title",
  "description": "Brief description of the curriculum",
  "modules": [
    {
      "title": "Module 1 - Name",
      "description": "Module description",
      "topics": [
        {
          "title": "Topic 1.1 - Name",
          "description": "Topic description",
          "lessons": [
            {
              "title": "Lesson 1.1.1 - Name",
              "description": "Lesson description"
            }
          ]
        }
      ]
    }
  ]
}

DOCUMENT CONTENT:
"""


def build_curriculum_prompt(document_text: str) -> str:
    return CURRICULUM_GENERATION_PROMPT + document_text
