"""Tests for the Bedrock reranker with a mocked boto3 client."""

from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from docsearch.boundary.rerank import BedrockReranker
from docsearch.core.exceptions import RerankError

MODEL_ARN = "arn:aws:bedrock:us-west-2::foundation-model/amazon.rerank-v1:0"


@pytest.fixture
def client() -> MagicMock:
    return MagicMock()


class TestBedrockReranker:
    """Test rerank request and response handling."""

    @pytest.mark.asyncio
    async def test_builds_request_and_parses_hits(self, client: MagicMock) -> None:
        """Should send inline text sources and return index/score hits."""
        client.rerank.return_value = {
            "results": [{"index": 1, "relevanceScore": 0.9}, {"index": 0, "relevanceScore": 0.2}]
        }
        reranker = BedrockReranker(MODEL_ARN, client=client)

        hits = await reranker.rerank("grid columns", ["doc a", "doc b"], top_n=5)

        assert [(h.index, h.score) for h in hits] == [(1, 0.9), (0, 0.2)]
        request = client.rerank.call_args.kwargs
        assert request["queries"] == [{"type": "TEXT", "textQuery": {"text": "grid columns"}}]
        assert request["sources"][1]["inlineDocumentSource"]["textDocument"]["text"] == "doc b"
        config = request["rerankingConfiguration"]["bedrockRerankingConfiguration"]
        assert config["numberOfResults"] == 2
        assert config["modelConfiguration"]["modelArn"] == MODEL_ARN

    @pytest.mark.asyncio
    async def test_no_documents(self, client: MagicMock) -> None:
        """Should return nothing without calling Bedrock."""
        reranker = BedrockReranker(MODEL_ARN, client=client)

        assert await reranker.rerank("q", [], top_n=3) == []
        client.rerank.assert_not_called()

    @pytest.mark.asyncio
    async def test_client_error(self, client: MagicMock) -> None:
        """Should raise RerankError on a failed call."""
        client.rerank.side_effect = ClientError(
            {"Error": {"Code": "ThrottlingException", "Message": "slow down"}}, "Rerank"
        )
        reranker = BedrockReranker(MODEL_ARN, client=client)

        with pytest.raises(RerankError):
            await reranker.rerank("q", ["doc"], top_n=1)

    def test_requires_model_arn(self, client: MagicMock) -> None:
        """Should reject an empty model ARN."""
        with pytest.raises(ValueError):
            BedrockReranker("", client=client)
