NO_CONTEXT = "No relevant documents found."

NO_ANSWER = "I don't know."

ANSWER_PROMPT_TEMPLATE = """You are a helpful assistant that answers customer service questions from account documents. Answer based only on the provided context.
- Answer **directly** and **do not include any reasoning or explanations**.
- Do **not** include "<think>" or any thoughts, just provide the **final answer only**.
- If the context is insufficient or irrelevant to the question, reply exactly: {no_answer}

---- CONTEXT ----
{context}
---- END CONTEXT ----

QUESTION: {question}
ANSWER: """


def build_prompt(context: str, question: str) -> str:
    return ANSWER_PROMPT_TEMPLATE.format(
        context=context or NO_CONTEXT,
        question=question,
        no_answer=NO_ANSWER,
    )
