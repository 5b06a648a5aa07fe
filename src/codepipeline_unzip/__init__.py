"""CodePipeline Lambda action that republishes a zip artifact's contents to S3."""
