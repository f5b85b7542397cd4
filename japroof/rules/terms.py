"""技術用語の表記ゆれ(term-notation)。

Web技術・生成AI・AWS・Azure・OCI の各辞書は設定で個別に切り替えられる。
用語参照サービス(lookup)が渡された場合は、辞書にない英字の固有名詞を
正式名称と照合する。参照に失敗した場合は AppError を送出し、このルールの結果は空になる。
"""
from __future__ import annotations
import re
from typing import Dict, List, Optional, Protocol, Sequence

from rapidfuzz import fuzz

from ..models import AdvancedDiagnostic, Token, is_noun
from ..detection import find_literals, word_boundary
from .base import BaseRule, RuleContext

WEB_TECH_TERMS: Dict[str, str] = {
    "Javascript": "JavaScript",
    "javascript": "JavaScript",
    "Typescript": "TypeScript",
    "typescript": "TypeScript",
    "Github": "GitHub",
    "github": "GitHub",
    "Nodejs": "Node.js",
    "nodejs": "Node.js",
    "NodeJs": "Node.js",
    "Vscode": "VS Code",
    "vscode": "VS Code",
    "VScode": "VS Code",
    "Webpack": "webpack",
    "ReactJs": "React",
    "Reactjs": "React",
    "VueJs": "Vue.js",
    "Vuejs": "Vue.js",
    "vuejs": "Vue.js",
    "AngularJs": "Angular",
    "Angularjs": "Angular",
    "Nextjs": "Next.js",
    "nextjs": "Next.js",
    "NextJs": "Next.js",
}

GENERATIVE_AI_TERMS: Dict[str, str] = {
    "chatgpt": "ChatGPT",
    "Chatgpt": "ChatGPT",
    "chat-gpt": "ChatGPT",
    "openai": "OpenAI",
    "Openai": "OpenAI",
    "Open AI": "OpenAI",
    "gpt-4": "GPT-4",
    "gpt4": "GPT-4",
    "GPT4": "GPT-4",
    "llm": "LLM",
    "Llm": "LLM",
    "rag": "RAG",
    "Rag": "RAG",
    "gemini": "Gemini",
    "copilot": "Copilot",
    "Co-pilot": "Copilot",
    "midjourney": "Midjourney",
    "Mid Journey": "Midjourney",
    "stable diffusion": "Stable Diffusion",
    "StableDiffusion": "Stable Diffusion",
}

AWS_TERMS: Dict[str, str] = {
    "aws": "AWS",
    "Aws": "AWS",
    "ec2": "EC2",
    "s3": "S3",
    "dynamodb": "DynamoDB",
    "Dynamodb": "DynamoDB",
    "rds": "RDS",
    "cloudformation": "CloudFormation",
    "Cloud Formation": "CloudFormation",
    "cloudwatch": "CloudWatch",
    "Cloud Watch": "CloudWatch",
    "ecs": "ECS",
    "eks": "EKS",
    "fargate": "Fargate",
    "sagemaker": "SageMaker",
    "Sagemaker": "SageMaker",
    "Sage Maker": "SageMaker",
    "bedrock": "Bedrock",
}

AZURE_TERMS: Dict[str, str] = {
    "azure": "Azure",
    "AZURE": "Azure",
    "azure functions": "Azure Functions",
    "azure devops": "Azure DevOps",
    "AzureDevOps": "Azure DevOps",
    "azure ad": "Azure AD",
    "AzureAD": "Azure AD",
    "cosmos db": "Cosmos DB",
    "CosmosDB": "Cosmos DB",
    "azure openai": "Azure OpenAI",
    "AzureOpenAI": "Azure OpenAI",
}

OCI_TERMS: Dict[str, str] = {
    "oci": "OCI",
    "Oci": "OCI",
    "oracle cloud infrastructure": "Oracle Cloud Infrastructure",
    "oracle cloud": "Oracle Cloud",
    "autonomous database": "Autonomous Database",
    "oci generative ai": "OCI Generative AI",
}

_LATIN_TERM = re.compile(r"^[A-Za-z][A-Za-z0-9.+\-]{2,}$")
_NORMALIZE = re.compile(r"[^0-9a-z]")


class TermLookup(Protocol):
    def get_summary(self, term: str):
        ...


def active_terms(config) -> Dict[str, str]:
    combined: Dict[str, str] = {}
    if config.enable_web_tech_dictionary:
        combined.update(WEB_TECH_TERMS)
    if config.enable_generative_ai_dictionary:
        combined.update(GENERATIVE_AI_TERMS)
    if config.enable_aws_dictionary:
        combined.update(AWS_TERMS)
    if config.enable_azure_dictionary:
        combined.update(AZURE_TERMS)
    if config.enable_oci_dictionary:
        combined.update(OCI_TERMS)
    combined.update(config.custom_notation_rules)
    return {k: v for k, v in combined.items() if k != v}


def _normalize(term: str) -> str:
    return _NORMALIZE.sub("", term.lower())


class TermNotationRule(BaseRule):
    name = "term-notation"
    description = "技術用語の表記を統一します"
    code = "term-notation"
    config_flag = "enable_term_notation"

    def __init__(self, lookup: Optional[TermLookup] = None, max_lookups: int = 20, min_similarity: float = 90.0):
        self.lookup = lookup
        self.max_lookups = max_lookups
        self.min_similarity = min_similarity

    def check(self, tokens: Sequence[Token], context: RuleContext) -> List[AdvancedDiagnostic]:
        text = context.document_text
        terms = active_terms(context.config)
        out: List[AdvancedDiagnostic] = []
        for h in find_literals(text, terms, accept=word_boundary):
            correct = terms[h.key]
            out.append(self.diagnostic(
                context, h.start, h.end,
                f"「{h.key}」は「{correct}」と表記してください",
                suggestions=[correct],
            ))
        if self.lookup is not None:
            known = set(terms) | set(terms.values())
            out.extend(self._check_with_lookup(tokens, context, known))
        return out

    def _check_with_lookup(self, tokens: Sequence[Token], context: RuleContext, known) -> List[AdvancedDiagnostic]:
        candidates: Dict[str, List[Token]] = {}
        for tok in tokens:
            if not is_noun(tok) or tok.pos_detail1 != "固有名詞":
                continue
            if tok.surface in known or not _LATIN_TERM.match(tok.surface):
                continue
            candidates.setdefault(tok.surface, []).append(tok)
        out: List[AdvancedDiagnostic] = []
        for surface in list(candidates)[: self.max_lookups]:
            summary = self.lookup.get_summary(surface)
            if summary is None or summary.title == surface:
                continue
            score = fuzz.ratio(_normalize(surface), _normalize(summary.title))
            if score < self.min_similarity:
                continue
            for tok in candidates[surface]:
                out.append(self.diagnostic(
                    context, tok.start, tok.end,
                    f"「{surface}」の正式な表記は「{summary.title}」です",
                    suggestions=[summary.title],
                    data={"similarity": score},
                ))
        out.sort(key=lambda d: (d.start, d.end))
        return out


__all__ = [
    "WEB_TECH_TERMS",
    "GENERATIVE_AI_TERMS",
    "AWS_TERMS",
    "AZURE_TERMS",
    "OCI_TERMS",
    "TermLookup",
    "TermNotationRule",
    "active_terms",
]
