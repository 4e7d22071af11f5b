"""Analysis prompts for Schedule B & C highway engineering documents."""

from highway_assist.models import DocumentType

_SUBTASK_SEPARATOR = (
    "This is a new subtask after end of previous subtask as denoted by closing "
    "of previous subtask and start of new subtask"
)

HIGHWAY_PROMPT = f"""Give me full deep analysis of this document as per below subtasks. Do not skip any TCS or Clause and continue without my intervention for anything.

<subtask1>
---------------------------------------
System prompt: You are an intelligent contractual data extractor and classifier.
User: Extract all the Clauses and their sub-clauses, and the Tables in Schedule B, tagging them intelligently with the category of information.
</subtask1>

{_SUBTASK_SEPARATOR}

<subtask2>
---------------------------------------
System prompt: You are a highway technical engineer looking at Highway Cross Sections.
User: Extract all the Elements from each of the cross sections and each corresponding dimension with the labels "width", "height" and "slope value in percent". Do not infer anything: if a dimension or detail is not present just give "not present". Do not confuse different slopes with each other (e.g. the slope of the embankment is different from the slope of the carriageway) and add a label in the median for the type of Median in the cross section as well. Also classify their location as LHS or RHS.
</subtask2>

{_SUBTASK_SEPARATOR}

<subtask3>
---------------------------------------
System prompt: You are an IRC Code and MoRTH Orange Book expert.
User: Cross check all the extracted information from <subtask1> with the relevant IRC standards. Then cross check all the extracted information from <subtask2> with the relevant IRC standards. Do not club two cross sections in the output. Format the output as a table for each cross section as | Element | Dimension | Relevant IRC Code and its Clause | Your Remarks |, marking each remark with ✅ compliant, ❌ non-compliant or ⚠️ needs review.
---------------------------------------
</subtask3>

{_SUBTASK_SEPARATOR}

<subtask4>
---------------------------------------
System prompt: You are an intelligent reviewer with high reasoning.
User: Cross check the clauses extracted in <subtask1> with the information extracted in <subtask2> and highlight the differences.
---------------------------------------
</subtask4>"""

GENERAL_PROMPT = """Analyze this highway engineering document for compliance and accuracy:

1. **Document Classification**: Identify the document type and key sections
2. **Content Extraction**: Extract all relevant technical data, specifications, and measurements
3. **Compliance Review**: Check against applicable IRC codes and MoRTH standards
4. **Issues Identification**: Highlight any compliance issues, missing information, or potential problems
5. **Recommendations**: Provide specific recommendations for improvement or correction

Please provide a detailed analysis with compliance scoring and actionable insights."""


def analysis_prompt(document_type: DocumentType) -> str:
    if document_type is DocumentType.HIGHWAY:
        return HIGHWAY_PROMPT
    return GENERAL_PROMPT


def pdf_requirements(filename: str) -> str:
    """Per-file instructions appended to the prompt of a PDF analysis."""
    return (
        f"\nDOCUMENT: {filename}\n"
        "ANALYSIS REQUIREMENTS:\n"
        "1. Apply all 4 subtasks to the entire document\n"
        "2. Pay special attention to cross-sections and IRC codes\n"
        "3. Include raw measurements from drawings"
    )


def question_prompt(question: str, context: str) -> str:
    return (
        "Based on the following highway engineering document content, please answer "
        f"this question: {question}\n\n"
        f"Document Content:\n{context}\n\n"
        "Please provide a comprehensive answer with specific references to the "
        "document content."
    )
