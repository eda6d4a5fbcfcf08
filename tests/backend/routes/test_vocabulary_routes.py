import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from backend.models.vocabulary import LearnerVocabulary, VocabularyTranslation
from backend.routes.vocabulary_routes import (
    CreateEntryRequest,
    TranslationPayload,
    UpdateEntryRequest,
    UpdateTranslationRequest,
    create_entry,
    create_translation,
    delete_entry,
    delete_translation,
    get_entry,
    list_entries,
    update_entry,
    update_translation,
)


def _create_hello(db_session, author):
    request = CreateEntryRequest(
        english_text='Hello',
        notes='Basic greeting',
        translations=[
            {'language_code': 'es', 'translation': 'Hola'},
            {'language_code': 'fr', 'translation': 'Bonjour'},
        ],
    )
    return create_entry(request, db=db_session, current_user=author)['entry']


def test_translation_payload_requires_language_code() -> None:
    with pytest.raises(ValidationError):
        TranslationPayload(language_code='e', translation='Hola')


def test_create_entry_defaults_kind_and_tags(db_session, learner) -> None:
    entry = _create_hello(db_session, learner)

    assert entry.kind == 'WORD'
    assert entry.tags == []
    assert entry.created_by_id == learner.id
    assert sorted(t.language_code for t in entry.translations) == ['es', 'fr']


def test_get_entry_returns_404_when_missing(db_session, learner) -> None:
    with pytest.raises(HTTPException) as exception_info:
        get_entry('missing', db=db_session, current_user=learner)

    assert exception_info.value.detail == 'Vocabulary entry not found'


def test_list_entries_returns_created_entries(db_session, learner) -> None:
    _create_hello(db_session, learner)

    entries = list_entries(db=db_session, current_user=learner)['entries']

    assert [entry.english_text for entry in entries] == ['Hello']


def test_update_entry_changes_only_supplied_fields(db_session, learner) -> None:
    entry = _create_hello(db_session, learner)

    updated = update_entry(
        entry.id,
        UpdateEntryRequest(kind='PHRASE', tags=['greetings']),
        db=db_session,
        current_user=learner,
    )['entry']

    assert updated.english_text == 'Hello'
    assert updated.notes == 'Basic greeting'
    assert updated.kind == 'PHRASE'
    assert updated.tags == ['greetings']


def test_translation_lifecycle(db_session, learner) -> None:
    entry = _create_hello(db_session, learner)

    translation = create_translation(
        entry.id,
        TranslationPayload(language_code='de', translation='Hallo', usage_example='Hallo, Welt!'),
        db=db_session,
        current_user=learner,
    )['translation']
    assert translation.entry_id == entry.id

    updated = update_translation(
        entry.id,
        translation.id,
        UpdateTranslationRequest(translation='Servus'),
        db=db_session,
        current_user=learner,
    )['translation']
    assert updated.translation == 'Servus'
    assert updated.language_code == 'de'
    assert updated.usage_example == 'Hallo, Welt!'

    delete_translation(entry.id, translation.id, db=db_session, current_user=learner)
    assert db_session.get(VocabularyTranslation, translation.id) is None


def test_translation_must_belong_to_entry(db_session, learner) -> None:
    hello = _create_hello(db_session, learner)
    other = create_entry(CreateEntryRequest(english_text='Goodbye'), db=db_session, current_user=learner)['entry']

    with pytest.raises(HTTPException) as exception_info:
        update_translation(
            other.id,
            hello.translations[0].id,
            UpdateTranslationRequest(translation='Adiós'),
            db=db_session,
            current_user=learner,
        )

    assert exception_info.value.status_code == 404
    assert exception_info.value.detail == 'Translation not found'


def test_delete_entry_removes_translations_and_learner_progress(db_session, learner) -> None:
    entry = _create_hello(db_session, learner)
    db_session.add(LearnerVocabulary(user_id=learner.id, entry_id=entry.id, status='NEW'))
    db_session.commit()

    delete_entry(entry.id, db=db_session, current_user=learner)

    assert db_session.query(VocabularyTranslation).count() == 0
    assert db_session.query(LearnerVocabulary).count() == 0


def test_vocabulary_endpoint_round_trip(client, auth_headers) -> None:
    created = client.post(
        '/api/vocabulary',
        json={'english_text': 'How are you?', 'kind': 'PHRASE', 'translations': [{'language_code': 'es', 'translation': '¿Cómo estás?'}]},
        headers=auth_headers,
    )
    assert created.status_code == 201
    entry = created.json()['entry']
    assert entry['translations'][0]['translation'] == '¿Cómo estás?'

    invalid = client.post('/api/vocabulary', json={'english_text': ''}, headers=auth_headers)
    assert invalid.status_code == 400
