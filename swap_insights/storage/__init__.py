"""
Storage package — persisted trading analyses.

schema: StoredAnalysis payloads, fingerprints, store-or-skip decision.
store: TradingAnalysisStorage over an injected AnalysisStore.
sql_store / walrus_http: AnalysisStore implementations.
locks: per-wallet serialization of store decisions.
"""
