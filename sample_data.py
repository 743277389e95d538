#!/usr/bin/env python3
"""Datos de ejemplo (ONGs de Sergipe) para poblar el almacén en desarrollo."""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from models import OpportunityPosting
from text_normalizer import parse_skills

SAMPLE_ORGANIZATIONS = [
    {"ref": "ajosse", "name": "AJOSSE - Associação dos Jovens de Sergipe", "location": "Aracaju"},
    {"ref": "casa-da-acolhida", "name": "Casa da Acolhida", "location": "Nossa Senhora do Socorro"},
    {"ref": "projeto-semente", "name": "Projeto Semente", "location": "Lagarto"},
    {"ref": "instituto-mangue-vivo", "name": "Instituto Mangue Vivo", "location": "São Cristóvão"},
    {"ref": "rede-solidaria", "name": "Rede Solidária Sergipe", "location": "Itabaiana"},
]

SAMPLE_VOLUNTEERS: List[Dict[str, Any]] = [
    {
        "name": "Maria Silva Santos",
        "bio": "Professora aposentada com 30 anos de experiência em educação infantil. Quero continuar contribuindo com a educação de crianças.",
        "skills": "Ensino, Comunicação",
        "locations": ["Aracaju"],
    },
    {
        "name": "João Pedro Almeida",
        "bio": "Desenvolvedor de software com experiência em Python e React. Quero usar minhas habilidades para ajudar ONGs com tecnologia.",
        "skills": "JavaScript, React, Design",
        "locations": ["Lagarto"],
    },
    {
        "name": "Ana Carolina Menezes",
        "bio": "Nutricionista formada pela UFS, apaixonada por alimentação saudável e educação nutricional para comunidades.",
        "skills": "Nutrição, Saúde, Culinária, Ensino",
        "locations": [],
    },
]

SAMPLE_OPPORTUNITIES: List[Dict[str, Any]] = [
    {
        "title": "Professor de Informática Básica",
        "description": "Ensinar informática básica (Word, Excel, Internet) para jovens em capacitação profissional. Aulas duas vezes por semana no turno da tarde.",
        "skills_required": "Ensino, Comunicação",
        "estimated_hours": 20,
    },
    {
        "title": "Designer para Material de Divulgação",
        "description": "Criar materiais gráficos para campanhas de doação: cartazes, posts para redes sociais e folders.",
        "skills_required": "Design, Marketing, Redes Sociais",
        "estimated_hours": 15,
    },
    {
        "title": "Voluntário para Distribuição de Alimentos",
        "description": "Ajudar na organização e distribuição de cestas básicas aos sábados pela manhã.",
        "skills_required": "Logística, Comunicação",
        "estimated_hours": 8,
    },
    {
        "title": "Educador Ambiental",
        "description": "Ministrar palestras e oficinas sobre preservação ambiental em escolas públicas de Aracaju.",
        "skills_required": "Meio Ambiente, Ensino, Comunicação",
        "estimated_hours": 12,
    },
    {
        "title": "Apoio Administrativo",
        "description": "Auxiliar nas atividades administrativas da ONG: organização de documentos, atendimento e planilhas.",
        "skills_required": "Gestão de Projetos, Contabilidade",
        "estimated_hours": 16,
    },
    {
        "title": "Contador Voluntário",
        "description": "Apoiar a ONG com questões contábeis, prestação de contas e orientação fiscal.",
        "skills_required": "Contabilidade, Gestão de Projetos",
        "estimated_hours": 10,
    },
    {
        "title": "Professor de Reforço Escolar",
        "description": "Dar aulas de reforço de matemática e português para crianças do ensino fundamental.",
        "skills_required": "Ensino, Comunicação",
        "estimated_hours": 12,
    },
    {
        "title": "Social Media",
        "description": "Gerenciar as redes sociais da ONG: criar conteúdo, responder comentários e aumentar engajamento.",
        "skills_required": "Marketing, Redes Sociais, Design",
        "estimated_hours": 8,
    },
    {
        "title": "Plantio de Mudas no Manguezal",
        "description": "Participar de mutirões de plantio de mudas para recuperação de áreas degradadas do manguezal.",
        "skills_required": "Meio Ambiente, Agricultura",
        "estimated_hours": 6,
    },
    {
        "title": "Oficina de Artesanato",
        "description": "Ensinar técnicas de artesanato para mulheres em situação de vulnerabilidade como fonte de renda.",
        "skills_required": "Artesanato, Ensino",
        "estimated_hours": 20,
    },
]


def build_sample_postings(now: Optional[datetime] = None, days_step: int = 4) -> List[OpportunityPosting]:
    # reparte las vacantes entre ONGs y escalona la antigüedad
    now = now or datetime.now(timezone.utc)
    postings: List[OpportunityPosting] = []
    for i, opp in enumerate(SAMPLE_OPPORTUNITIES):
        org = SAMPLE_ORGANIZATIONS[i % len(SAMPLE_ORGANIZATIONS)]
        postings.append(OpportunityPosting(
            id=f"sample-{i + 1:02d}",
            title=opp["title"],
            description=opp["description"],
            skills_required=frozenset(parse_skills(opp["skills_required"])),
            estimated_hours=float(opp["estimated_hours"]),
            location=org["location"],
            created_at=now - timedelta(days=i * days_step),
            organization_ref=org["ref"],
        ))
    return postings
