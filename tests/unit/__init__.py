"""
Unit tests for EcoChat core modules.

This package contains unit tests for:
- analyzer: QueryAnalyzer complexity and categorisation
- catalog: ProviderCatalog defaults and validation
- selector: ProviderSelector scoring and savings
- config: EcoChatConfig loading
- providers: Provider factory and OpenAI-compatible provider
- climatiq: Footprint lookup and fallback
- pipeline: EcoChat chat flow
"""
