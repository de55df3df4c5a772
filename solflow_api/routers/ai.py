from fastapi import APIRouter, Depends

from ..deps import get_generator
from ..ia import WorkflowGenerator
from ..models.ai import GenerateWorkflowRequest, GenerateWorkflowResponse, SuggestNextRequest, SuggestNextResponse

router = APIRouter()


# Provider SDKs are blocking; plain `def` routes run in the threadpool.

@router.post("/ai/generate-workflow", response_model=GenerateWorkflowResponse)
def generate_workflow(
    req: GenerateWorkflowRequest, generator: WorkflowGenerator = Depends(get_generator)
) -> GenerateWorkflowResponse:
    """Draft a node/edge graph from a natural-language prompt"""
    return generator.generate(req.prompt, req.node_types)


@router.post("/ai/suggest-next", response_model=SuggestNextResponse)
def suggest_next(req: SuggestNextRequest, generator: WorkflowGenerator = Depends(get_generator)) -> SuggestNextResponse:
    return SuggestNextResponse(suggestions=generator.suggest_next(req.current_nodes, req.selected_node))
