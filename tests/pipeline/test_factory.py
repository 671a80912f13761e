from curator.pipeline import factory
from curator.pipeline.backfill import BackfillReconciler
from curator.pipeline.bulk_import import BulkImporter


def test_build_pipeline_wires_collaborators(mocker, settings, session_factory, fake_llm):
    mocker.patch.object(factory, "get_session_factory", return_value=session_factory)
    mocker.patch.object(factory, "get_llm_client", return_value=fake_llm())

    pipeline = factory.build_pipeline(settings)

    assert pipeline.processor.repository is pipeline.repository
    assert pipeline.processor.publisher is pipeline.publisher
    assert pipeline.repository.max_attempts == 3
    assert pipeline.discord_api._client.headers["Authorization"] == "Bot test-token"
    assert isinstance(pipeline.backfill(), BackfillReconciler)
    assert isinstance(pipeline.bulk_importer(), BulkImporter)
    pipeline.close()
