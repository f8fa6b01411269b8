"""コマンドタグ抽出のCLIツール群."""
