import json

import pytest

from cognaforge.flows import (
    analyze_text,
    argument_duel,
    boss_level_challenge,
    clarify_concept,
    cognitive_battle,
    construct_knowledge,
    evaluate_answer_and_continue,
    generate_daily_teaser,
    generate_flashcards,
    navigate_cognitive_bias,
    plan_day,
    simulate_interview,
    summarize_note,
    writing_assistant,
)
from cognaforge.flows.challenges import NO_CORRECT_ANSWER, NO_EVALUATION

LONG_TEXT = "A fotossíntese converte luz em energia química nas plantas, liberando oxigênio."


class TestNotes:
    def test_summarize_note(self, fake_client):
        client = fake_client('{"summary": "Resumo curto."}')
        out = summarize_note(client, "# Nota\nConteúdo suficiente para resumir.")
        assert out == {"summary": "Resumo curto."}
        assert "Conteúdo suficiente" in client.prompts[0]
        assert '"summary"' in client.prompts[0]

    def test_summarize_note_too_short(self, fake_client):
        client = fake_client()
        with pytest.raises(ValueError):
            summarize_note(client, "curta")
        assert client.prompts == []

    def test_analyze_text_coerces_lists(self, fake_client):
        answer = '```json\n{"summary": "s", "keyPoints": "luz, energia", "keywords": ["fotossíntese"]}\n```'
        out = analyze_text(fake_client(answer), LONG_TEXT)
        assert out == {"summary": "s", "keyPoints": ["luz", "energia"], "keywords": ["fotossíntese"]}

    def test_analyze_text_min_length(self, fake_client):
        with pytest.raises(ValueError):
            analyze_text(fake_client(), "curto demais")


class TestStudy:
    def test_clarify_concept_degrades_to_placeholders(self, fake_client):
        out = clarify_concept(fake_client("simplifiedExplanation: É simples\nsem mais nada"), "Entropia")
        assert out["simplifiedExplanation"] == "É simples"
        assert out["keyPoints"] == []
        assert out["analogy"] == 'Não foi possível extrair o campo "analogy"'

    def test_flashcards_filters_bad_cards(self, fake_client):
        answer = json.dumps({"flashcards": [
            {"front": " Átomo ", "back": "Menor unidade"},
            {"front": "sem verso"},
            "texto solto",
        ]})
        out = generate_flashcards(fake_client(answer), "Química", 3)
        assert out == {"flashcards": [{"front": "Átomo", "back": "Menor unidade"}]}

    def test_flashcards_from_bare_list(self, fake_client):
        out = generate_flashcards(fake_client('[{"front": "A", "back": "B"}]'), "Letras", 1)
        assert out["flashcards"] == [{"front": "A", "back": "B"}]

    def test_flashcards_after_bracketed_prose(self, fake_client):
        answer = 'Aqui estão [2] cartões: {"flashcards": [{"front": "A", "back": "B"}, {"front": "C", "back": "D"}]}'
        out = generate_flashcards(fake_client(answer), "Letras", 2)
        assert out["flashcards"] == [{"front": "A", "back": "B"}, {"front": "C", "back": "D"}]

    @pytest.mark.parametrize("n", [0, 21])
    def test_flashcards_count_bounds(self, fake_client, n):
        with pytest.raises(ValueError):
            generate_flashcards(fake_client(), "Química", n)

    def test_construct_knowledge_prompt_defaults(self, fake_client):
        client = fake_client('{"mindMap": "# Mapa", "smartNotes": "Notas"}')
        out = construct_knowledge(client, "Ecologia", learning_style="Visual")
        assert out == {"mindMap": "# Mapa", "smartNotes": "Notas"}
        assert "Estilo de Aprendizagem: Visual" in client.prompts[0]
        assert "Ritmo: Não especificado" in client.prompts[0]


class TestInterview:
    def test_first_question_has_no_feedback(self, fake_client):
        client = fake_client('{"aiQuestion": "Fale sobre você.", "feedbackOnAnswer": "ignorado"}')
        out = simulate_interview(client, "Engenheiro de Software", "Técnico Detalhista")
        assert out == {"aiQuestion": "Fale sobre você.", "feedbackOnAnswer": None}
        assert "primeira pergunta" in client.prompts[0]

    def test_feedback_kept_when_answer_given(self, fake_client):
        client = fake_client('{"aiQuestion": "E depois?", "feedbackOnAnswer": "Boa resposta."}')
        history = [{"sender": "ai", "message": "Fale sobre você."}, {"sender": "user", "message": "Sou dev."}]
        out = simulate_interview(client, "Dev", "Amigável", user_answer="Sou dev.", history=history)
        assert out == {"aiQuestion": "E depois?", "feedbackOnAnswer": "Boa resposta."}
        assert "[user]: Sou dev." in client.prompts[0]

    def test_empty_feedback_becomes_none(self, fake_client):
        client = fake_client('{"aiQuestion": "E depois?", "feedbackOnAnswer": ""}')
        out = simulate_interview(client, "Dev", "Amigável", user_answer="Sou dev.")
        assert out["feedbackOnAnswer"] is None

    def test_invalid_sender(self, fake_client):
        with pytest.raises(ValueError):
            simulate_interview(fake_client(), "Dev", "Amigável", history=[{"sender": "bot", "message": "x"}])


class TestProductivity:
    def test_writing_assistant(self, fake_client):
        client = fake_client('{"suggestedText": "- ponto um\\n- ponto dois"}')
        out = writing_assistant(client, "Crie 2 pontos sobre isso", note_context="# Fotossíntese")
        assert out == {"suggestedText": "- ponto um\n- ponto dois"}
        assert "# Fotossíntese" in client.prompts[0]
        assert "Crie 2 pontos" in client.prompts[0]

    def test_writing_assistant_needs_prompt(self, fake_client):
        with pytest.raises(ValueError):
            writing_assistant(fake_client(), "   ")

    def test_daily_teaser(self, fake_client):
        out = generate_daily_teaser(fake_client('Aqui: {"teaser": "O que tem dentes e não morde?", "answer": "O pente"}'))
        assert out == {"teaser": "O que tem dentes e não morde?", "answer": "O pente"}

    def test_plan_day_lists_events(self, fake_client):
        client = fake_client('{"actionPlan": "### Plano", "motivationalQuote": "Vai!"}')
        events = [{"id": "1", "time": "09:00", "title": "Aula", "description": "Cálculo"}]
        out = plan_day(client, "2024-05-25", "Estudar limites", existing_events=events)
        assert out == {"actionPlan": "### Plano", "motivationalQuote": "Vai!"}
        assert "- 09:00: Aula (Cálculo)" in client.prompts[0]

    def test_plan_day_without_events(self, fake_client):
        client = fake_client('{"actionPlan": "### Plano", "motivationalQuote": "Vai!"}')
        plan_day(client, "2024-05-25", "Estudar limites")
        assert "Não há eventos pré-agendados" in client.prompts[0]

    def test_plan_day_rejects_event_without_time(self, fake_client):
        client = fake_client()
        with pytest.raises(ValueError):
            plan_day(client, "2024-05-25", "Estudar", existing_events=[{"title": "Aula"}])
        assert client.prompts == []


class TestChallenges:
    def test_argument_duel(self, fake_client):
        answer = json.dumps({
            "aiCritique": "Argumento fraco.",
            "reasoningFlaws": "Generalização apressada.",
            "improvementRecommendations": "Traga dados.",
        })
        client = fake_client(answer)
        out = argument_duel(client, "Energia nuclear", "É sempre perigosa")
        assert out["reasoningFlaws"] == "Generalização apressada."
        assert "É sempre perigosa" in client.prompts[0]

    def test_argument_duel_needs_stance(self, fake_client):
        with pytest.raises(ValueError):
            argument_duel(fake_client(), "Energia nuclear", "")

    def test_boss_level(self, fake_client):
        out = boss_level_challenge(fake_client('{"challenge": "Projete um circuito."}'), "Eletrônica")
        assert out == {"challenge": "Projete um circuito."}

    def test_bias_navigator_partial_answer(self, fake_client):
        out = navigate_cognitive_bias(fake_client('{"scenario": "Ana só lê notícias que concordam com ela.", "biasName": "Viés de Confirmação"'))
        assert out["biasName"] == "Viés de Confirmação"
        assert out["reflectionPrompt"] == 'Não foi possível extrair o campo "reflectionPrompt"'


class TestCognitiveBattle:
    def test_first_turn_only_asks(self, fake_client):
        client = fake_client('{"question": "O que é entropia?", "evaluation": "x", "feedback": "y"}')
        out = cognitive_battle(client, "Termodinâmica")
        assert out == {"question": "O que é entropia?", "evaluation": None, "feedback": None}
        assert "primeiro turno" in client.prompts[0]

    def test_later_turn_evaluates(self, fake_client):
        client = fake_client('{"question": "E a segunda lei?", "evaluation": "Boa.", "feedback": "Cite um exemplo."}')
        out = cognitive_battle(client, "Termodinâmica", user_answer="Desordem", previous_ai_response="O que é entropia?")
        assert out == {"question": "E a segunda lei?", "evaluation": "Boa.", "feedback": "Cite um exemplo."}

    def test_socratic_mode_never_evaluates(self, fake_client):
        client = fake_client('{"question": "Por que desordem?", "evaluation": "Boa."}')
        out = cognitive_battle(client, "Termodinâmica", user_answer="Desordem", socratic_mode=True)
        assert out == {"question": "Por que desordem?", "evaluation": None, "feedback": None}
        assert "Guia Socrático" in client.prompts[0]

    def test_missing_question_falls_back(self, fake_client):
        out = cognitive_battle(fake_client("não sei"), "Termodinâmica")
        assert out["question"] == "O que você sabe sobre Termodinâmica?"

    def test_evaluation_with_verdict_is_kept(self, fake_client):
        answer = json.dumps({
            "evaluation": "Sua resposta está CORRETA: muito bem.",
            "isCorrect": True,
            "correctAnswer": "Desordem.",
            "nextQuestion": "E a segunda lei?",
        })
        out = evaluate_answer_and_continue(fake_client(answer), "Termodinâmica", "O que é entropia?", "Desordem")
        assert out == {
            "evaluation": "Sua resposta está CORRETA: muito bem.",
            "isCorrect": True,
            "correctAnswer": "Desordem.",
            "nextQuestion": "E a segunda lei?",
        }

    def test_evaluation_gets_verdict_prefix(self, fake_client):
        answer = '{"evaluation": "Faltou citar a desordem.", "isCorrect": false}'
        client = fake_client(answer)
        out = evaluate_answer_and_continue(
            client, "Termodinâmica", "O que é entropia?", "Calor",
            previous_exchanges=[{"question": "O que é calor?", "userAnswer": "Energia", "evaluation": "ok"}],
        )
        assert out["evaluation"] == "Sua resposta está PARCIALMENTE CORRETA/INCORRETA: Faltou citar a desordem."
        assert out["isCorrect"] is False
        assert out["correctAnswer"] == NO_CORRECT_ANSWER
        assert out["nextQuestion"].startswith('Vamos continuar explorando o tópico "Termodinâmica"')
        assert "AVALIAÇÃO: ok" in client.prompts[0]

    def test_unparseable_evaluation_uses_fallbacks(self, fake_client):
        out = evaluate_answer_and_continue(fake_client("???"), "Termodinâmica", "O que é entropia?", "Calor")
        assert out["evaluation"] == "Sua resposta está PARCIALMENTE CORRETA/INCORRETA: " + NO_EVALUATION
        assert out["isCorrect"] is False
